from __future__ import annotations

from typing import Iterator, List, Optional

from atsched.scheduling.flight import Flight


class PairingNode:
	__slots__ = ("flight", "child", "sibling", "prev")

	def __init__(self, flight: Flight) -> None:
		self.flight = flight
		self.child: Optional[PairingNode] = None    # leftmost child
		self.sibling: Optional[PairingNode] = None  # right sibling
		self.prev: Optional[PairingNode] = None     # parent if leftmost, else left sibling

	def detach(self) -> None:
		self.child = None
		self.sibling = None
		self.prev = None


def _greater(a: PairingNode, b: PairingNode) -> bool:
	return a.flight.priority_key() > b.flight.priority_key()


class PairingHeap:
	"""Max pairing heap of pending flights.

	Ordering is by priority (higher first), then submission time (earlier
	first), then flight id (smaller first). Each inserted flight keeps its node
	in ``flight.heap_node`` so it can later be cut out by ``delete`` or moved
	up by ``increase_key`` without a rebuild.
	"""

	def __init__(self) -> None:
		self.root: Optional[PairingNode] = None
		self._size = 0

	def __len__(self) -> int:
		return self._size

	def is_empty(self) -> bool:
		return self.root is None

	def insert(self, flight: Flight) -> PairingNode:
		node = PairingNode(flight)
		flight.heap_node = node
		self.root = self._meld(self.root, node)
		self._size += 1
		return node

	def find_max(self) -> Optional[Flight]:
		return self.root.flight if self.root is not None else None

	def extract_max(self) -> Optional[Flight]:
		if self.root is None:
			return None
		old_root = self.root
		self.root = self._merge_pairs(old_root.child)
		self._size -= 1
		old_root.detach()
		old_root.flight.heap_node = None
		return old_root.flight

	def increase_key(self, node: PairingNode, new_priority: int) -> None:
		if new_priority < node.flight.priority:
			raise ValueError(
				f"new priority {new_priority} is lower than current {node.flight.priority} for flight {node.flight.flight_id}"
			)
		node.flight.priority = new_priority
		if node is self.root:
			return
		self._cut(node)
		self.root = self._meld(self.root, node)

	def update_priority(self, node: PairingNode, new_priority: int) -> PairingNode:
		if new_priority >= node.flight.priority:
			self.increase_key(node, new_priority)
			return node
		# A decrease can violate the order below the node, so re-insert it
		flight = node.flight
		self.delete(node)
		flight.priority = new_priority
		return self.insert(flight)

	def delete(self, node: PairingNode) -> None:
		if node is self.root:
			self.extract_max()
			return
		self._cut(node)
		children = self._merge_pairs(node.child)
		self.root = self._meld(self.root, children)
		self._size -= 1
		node.detach()
		node.flight.heap_node = None

	def clear(self) -> None:
		# Invalidate every handle so no stale node is cut later
		for node in self._nodes():
			node.flight.heap_node = None
		self.root = None
		self._size = 0

	def flights(self) -> List[Flight]:
		return [node.flight for node in self._nodes()]

	def _nodes(self) -> Iterator[PairingNode]:
		stack = [self.root] if self.root is not None else []
		while stack:
			node = stack.pop()
			yield node
			if node.sibling is not None:
				stack.append(node.sibling)
			if node.child is not None:
				stack.append(node.child)

	@staticmethod
	def _meld(a: Optional[PairingNode], b: Optional[PairingNode]) -> Optional[PairingNode]:
		if a is None:
			return b
		if b is None:
			return a
		if not _greater(a, b):
			a, b = b, a
		# b becomes the leftmost child of a
		b.sibling = a.child
		if a.child is not None:
			a.child.prev = b
		a.child = b
		b.prev = a
		return a

	def _merge_pairs(self, first: Optional[PairingNode]) -> Optional[PairingNode]:
		if first is None:
			return None
		# Left-to-right pass: meld siblings two at a time
		pairs: List[PairingNode] = []
		cur = first
		while cur is not None:
			nxt = cur.sibling
			after = nxt.sibling if nxt is not None else None
			cur.prev = cur.sibling = None
			if nxt is not None:
				nxt.prev = nxt.sibling = None
			pairs.append(self._meld(cur, nxt))
			cur = after
		# Right-to-left pass: fold the pairs into one tree
		result = pairs.pop()
		while pairs:
			result = self._meld(pairs.pop(), result)
		return result

	@staticmethod
	def _cut(node: PairingNode) -> None:
		if node.prev is not None:
			if node.prev.child is node:
				node.prev.child = node.sibling
			else:
				node.prev.sibling = node.sibling
			if node.sibling is not None:
				node.sibling.prev = node.prev
		node.prev = None
		node.sibling = None
