import heapq
from itertools import count


class MinHeap: # priority queue of tree nodes keyed by weight
    def __init__(self, weight=lambda node: node.frequency):
        self._entries = [] # heap of (weight, sequence, node)
        self._sequence = count() # ties resolve by insertion order, so rebuilds are reproducible
        self._weight = weight

    def __len__(self):
        return len(self._entries)

    def insert(self, node):
        heapq.heappush(self._entries, (self._weight(node), next(self._sequence), node))

    def extract_min(self): # lowest-weight node, or None when empty
        if not self._entries:
            return None
        return heapq.heappop(self._entries)[2]
