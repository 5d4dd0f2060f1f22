# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Sub-object layout of a most-derived class.

The resolver materializes one LayoutInstance per base sub-object:

- every non-virtual base-specifier creates its own instance, once per
  inheritance path (two non-virtual paths to `A` give two `A` sub-objects);
- all virtual base-specifiers naming the same class collapse into a single
  shared instance, no matter how many paths reach it;
- a virtual and a non-virtual route to the same class never merge.

Instances are produced by a pre-order walk from the complete object, which is
always instance 0. Besides the flat instance list, the layout records the
sub-object DAG (direct base sub-objects of each instance); a shared virtual
instance has several parents. Member lookup walks that DAG.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple

from loguru import logger

from cppsema.class_graph import ClassGraph

InstanceId = int


@dataclass(frozen=True)
class LayoutInstance:
	"""One materialized sub-object of a complete object."""

	instance_id: InstanceId
	class_name: str
	path: Tuple[str, ...]  # most-derived class first; first path seen for shared instances
	virtual: bool

	@property
	def depth(self) -> int:
		return len(self.path) - 1

	def label(self) -> str:
		via = "->".join(self.path)
		return f"{self.class_name} [{via}{', virtual' if self.virtual else ''}]"


@dataclass(frozen=True)
class ObjectLayout:
	class_name: str
	instances: Tuple[LayoutInstance, ...]
	# base_links[i] = direct base sub-objects of instance i, in base-specifier order.
	base_links: Tuple[Tuple[InstanceId, ...], ...]

	@property
	def complete_object(self) -> LayoutInstance:
		return self.instances[0]

	def __len__(self) -> int:
		return len(self.instances)

	def __iter__(self):
		return iter(self.instances)

	def bases_of(self, instance_id: InstanceId) -> Tuple[LayoutInstance, ...]:
		return tuple(self.instances[i] for i in self.base_links[instance_id])

	def instances_of(self, class_name: str) -> Tuple[LayoutInstance, ...]:
		return tuple(inst for inst in self.instances if inst.class_name == class_name)

	def subtree(self, instance_id: InstanceId) -> Tuple[LayoutInstance, ...]:
		"""`instance_id` and every sub-object reachable below it, each once, pre-order."""
		seen: set[InstanceId] = set()
		out: List[LayoutInstance] = []

		def walk(iid: InstanceId) -> None:
			if iid in seen:
				return
			seen.add(iid)
			out.append(self.instances[iid])
			for child in self.base_links[iid]:
				walk(child)

		walk(instance_id)
		return tuple(out)

	def is_within(self, instance_id: InstanceId, ancestor_id: InstanceId) -> bool:
		"""True when `instance_id` is `ancestor_id` itself or one of its base sub-objects."""
		return any(inst.instance_id == instance_id for inst in self.subtree(ancestor_id))


class LayoutResolver:
	"""
	Compute (and cache) ObjectLayouts over a ClassGraph.

	The cache is keyed by class name. A registered class never changes and its
	bases must be registered first, so a cached layout stays valid when more
	classes are registered later.
	"""

	def __init__(self, graph: ClassGraph) -> None:
		self._graph = graph
		self._cache: Dict[str, ObjectLayout] = {}

	@property
	def graph(self) -> ClassGraph:
		return self._graph

	def layout_of(self, class_name: str) -> ObjectLayout:
		cached = self._cache.get(class_name)
		if cached is not None:
			return cached
		self._graph.get(class_name)
		layout = self._compute(class_name)
		self._cache[class_name] = layout
		logger.debug(
			"layout of {}: {}",
			class_name,
			", ".join(inst.label() for inst in layout.instances),
		)
		return layout

	def instance_count(self, class_name: str, ancestor: str) -> int:
		return len(self.layout_of(class_name).instances_of(ancestor))

	def _compute(self, class_name: str) -> ObjectLayout:
		instances: List[LayoutInstance] = []
		links: List[List[InstanceId]] = []
		shared_virtual_seen: Dict[str, InstanceId] = {}

		def add(cls_name: str, path: Tuple[str, ...], virtual: bool) -> InstanceId:
			iid = len(instances)
			instances.append(LayoutInstance(instance_id=iid, class_name=cls_name, path=path, virtual=virtual))
			links.append([])
			return iid

		def walk(iid: InstanceId) -> None:
			inst = instances[iid]
			for base in self._graph.get(inst.class_name).bases:
				if base.virtual:
					shared = shared_virtual_seen.get(base.target)
					if shared is not None:
						links[iid].append(shared)
						continue
					child = add(base.target, inst.path + (base.target,), True)
					shared_virtual_seen[base.target] = child
				else:
					child = add(base.target, inst.path + (base.target,), False)
				links[iid].append(child)
				walk(child)

		walk(add(class_name, (class_name,), False))
		return ObjectLayout(
			class_name=class_name,
			instances=tuple(instances),
			base_links=tuple(tuple(l) for l in links),
		)


__all__ = ["InstanceId", "LayoutInstance", "ObjectLayout", "LayoutResolver"]
