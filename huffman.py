from typing import Dict, List, Optional, Sequence, Tuple

from minheap import MinHeap

ALPHABET_SIZE = 256 # every byte value 0..255 is a symbol

class HuffmanNode: # Node for Huffman tree, children are arena indices
    __slots__ = ("symbol", "frequency", "left", "right")

    def __init__(self, symbol, frequency, left=None, right=None):
        self.symbol = symbol    # byte or None
        self.frequency = frequency
        self.left = left # zero-branch index
        self.right = right # one-branch index

    def is_leaf(self):
        return self.left is None and self.right is None


class HuffmanTree:
    """Arena of HuffmanNode objects; the root is the last node created."""

    def __init__(self):
        self.nodes: List[HuffmanNode] = []
        self.root = 0

    def add(self, node: HuffmanNode) -> int:
        self.nodes.append(node)
        return len(self.nodes) - 1

    def step(self, index: int, bit: int) -> int: # follow one branch from an internal node
        node = self.nodes[index]
        return node.right if bit else node.left

    def leaf_symbols(self) -> List[int]:
        return sorted(n.symbol for n in self.nodes if n.is_leaf())

    def weighted_path_length(self) -> int:
        # sum(freq * depth) over leaves equals the sum of all internal weights
        return sum(n.frequency for n in self.nodes if not n.is_leaf())


def frequency_table(data: bytes) -> Tuple[int, ...]: # 256 counts indexed by byte value
    ft = [0] * ALPHABET_SIZE
    for b in data:
        ft[b] += 1
    return tuple(ft)

def build_huffman_tree(frequency_table: Sequence[int]) -> Optional[HuffmanTree]:
    """
    Greedy two-smallest merge over the nonzero entries of a 256-entry table.

    Returns None when every count is zero. The first node extracted becomes the
    zero-branch; equal weights leave the queue in insertion order, so the same
    table always yields the same tree.
    """
    tree = HuffmanTree()
    priority_queue = MinHeap(weight=lambda i: tree.nodes[i].frequency)

    for symbol, frequency in enumerate(frequency_table):
        if frequency > 0:
            priority_queue.insert(tree.add(HuffmanNode(symbol, frequency)))

    if len(priority_queue) == 0:
        return None

    # Build the tree; a single leaf stays the root with no branches
    while len(priority_queue) > 1:
        left = priority_queue.extract_min()
        right = priority_queue.extract_min()
        merged = HuffmanNode(None, tree.nodes[left].frequency + tree.nodes[right].frequency, left, right)
        priority_queue.insert(tree.add(merged))

    tree.root = priority_queue.extract_min()
    return tree

def generate_huffman_codes(tree: Optional[HuffmanTree]) -> Dict[int, str]:
    codes: Dict[int, str] = {}
    if tree is None:
        return codes

    root = tree.nodes[tree.root]
    if root.is_leaf(): # one distinct symbol, nothing to branch on
        codes[root.symbol] = '0'
        return codes

    stack = [(tree.root, '')] # explicit DFS, right pushed first so zero-branch is visited first
    while stack:
        index, path = stack.pop()
        node = tree.nodes[index]
        if node.is_leaf():
            codes[node.symbol] = path
            continue
        stack.append((node.right, path + '1'))
        stack.append((node.left, path + '0'))
    return codes

def is_prefix_free(codes: Dict[int, str]) -> bool:
    # after sorting, a prefix always sorts directly before some code it prefixes
    ordered = sorted(codes.values())
    return all(not b.startswith(a) for a, b in zip(ordered, ordered[1:]))

def average_code_length(codes: Dict[int, str], frequency_table: Sequence[int]) -> float:
    total = sum(frequency_table)
    if total == 0:
        return 0.0
    return sum(frequency_table[s] * len(c) for s, c in codes.items()) / total
