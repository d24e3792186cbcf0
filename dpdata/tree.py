"""Tree objects for representing candidate and gold parse trees."""
# This is an adaptation of the tree.py file from NLTK via disco-dop.
# Removed: parented, immutable & discontinuous trees, tree positions,
# drawing, &c.
# Original notice:
# Natural Language Toolkit: Text Trees
#
# Copyright (C) 2001-2010 NLTK Project
# Author: Edward Loper <edloper@gradient.cis.upenn.edu>
#         Steven Bird <sb@csse.unimelb.edu.au>
#         Nathan Bodenstab <bodenstab@cslu.ogi.edu> (tree transforms)
# URL: <http://www.nltk.org/>
# For license information, see LICENSE.TXT
import re

TOKENRE = re.compile(r'\(\s*([^\s()]+)?|\)|([^\s()]+)')


class Tree(object):
	"""A mutable, labeled, n-ary tree structure.

	A tree's children are encoded as a list of leaves and subtrees, where
	a leaf is a basic (non-tree) value, typically a word; and a subtree is a
	nested Tree.

	The constructor can be called in two ways:

	- ``Tree(label, children)`` constructs a new tree with the specified label
		and list of children.
	- ``Tree(s)`` constructs a new tree by parsing the string s. Equivalent to
		calling the class method ``Tree.parse(s)``.

	Traversals use an explicit agenda instead of recursion, so that there is
	no limit on the depth of a tree.

	>>> tree = Tree('(S (NP Mary) (VP (VB is) (JJ rich)))')
	>>> tree.label, tree.leaves()
	('S', ['Mary', 'is', 'rich'])
	>>> print(tree[1])
	(VP (VB is) (JJ rich))
	"""
	__slots__ = ('label', 'children')

	def __new__(cls, label_or_str, children=None):
		if children is None:
			if not isinstance(label_or_str, str):
				raise TypeError('%s: Expected a label and child list '
						'or a single string; got: %s' % (
						cls.__name__, type(label_or_str)))
			return cls.parse(label_or_str)
		if isinstance(children, str) or not hasattr(children, '__iter__'):
			raise TypeError('%s() argument 2 should be a list, not a '
					'string' % cls.__name__)
		return object.__new__(cls)

	def __init__(self, label_or_str, children=None):
		# When __new__ delegates to Tree.parse(), __init__ is called again
		# on the finished tree; it must be left alone.
		if children is None:
			return
		self.label = label_or_str
		self.children = list(children)

	def __eq__(self, other):
		if not isinstance(other, Tree):
			return False
		agenda = [(self, other)]
		while agenda:
			a, b = agenda.pop()
			if isinstance(a, Tree):
				if (not isinstance(b, Tree) or a.label != b.label
						or len(a.children) != len(b.children)):
					return False
				agenda.extend(zip(a.children, b.children))
			elif isinstance(b, Tree) or a != b:
				return False
		return True

	# === Delegated list operations ==============================
	def __iter__(self):
		return self.children.__iter__()

	def __getitem__(self, index):
		return self.children.__getitem__(index)

	# === Basic tree operations =================================
	def leaves(self):
		""":returns: list containing this tree's leaves.

		The order reflects the order of the tree's hierarchical structure."""
		leaves = []
		agenda = [self]
		while agenda:
			node = agenda.pop()
			if isinstance(node, Tree):
				agenda.extend(node.children[::-1])
			else:
				leaves.append(node)
		return leaves

	def height(self):
		""":returns: The longest distance from this node to a leaf node.

		- The height of a tree containing no children is 1;
		- the height of a tree containing only leaves is 2;
		- the height of any other tree is one plus the maximum of its
			children's heights."""
		result = 1
		agenda = [(self, 1)]
		while agenda:
			node, depth = agenda.pop()
			result = max(result, depth)
			if isinstance(node, Tree):
				agenda.extend((child, depth + 1) for child in node.children)
		return result

	def subtrees(self, condition=None):
		"""Yield subtrees of this tree in depth-first, pre-order traversal.

		:param condition: a function ``Tree -> bool`` to filter which nodes are
			yielded (does not affect whether children are visited).

		NB: store traversal as list before any structural modifications."""
		agenda = [self]
		while agenda:
			node = agenda.pop()
			if isinstance(node, Tree):
				if condition is None or condition(node):
					yield node
				agenda.extend(node[::-1])

	def ispreterminal(self):
		"""Test whether this node is nonempty and dominates only leaves."""
		return bool(self.children) and not any(
				isinstance(child, Tree) for child in self.children)

	def pos(self):
		""":returns: a list of (word, tag) tuples for the preterminals of
			this tree, in order."""
		return [(child, node.label)
				for node in self.subtrees(Tree.ispreterminal)
				for child in node]

	def copy(self, deep=False):
		"""Create a copy of this tree.

		:param deep: if True, copy all subtrees, so that the copy shares no
			nodes with this tree; otherwise only this node is copied and its
			children are shared."""
		if not deep:
			return self.__class__(self.label, self.children)
		result = self.__class__(self.label, ())
		agenda = [(self, result)]
		while agenda:
			node, dup = agenda.pop()
			for child in node.children:
				if isinstance(child, Tree):
					newchild = self.__class__(child.label, ())
					agenda.append((child, newchild))
					child = newchild
				dup.children.append(child)
		return result

	def __copy__(self):
		return self.copy()

	def __deepcopy__(self, memo):
		return self.copy(deep=True)

	# === Parsing ===============================================
	@classmethod
	def parse(cls, s, parse_leaf=None):
		"""Parse a bracketed tree string and return the resulting tree.

		Trees are represented as nested bracketings, such as:
		``(S (NP (NNP John)) (VP (V runs)))``; the root label may be empty,
		as in ``( (S ...))``.

		:param s: The string to parse
		:param parse_leaf: If specified, this function is applied to the
			substrings of s corresponding to leaves to obtain their values.
		:raises ValueError: if s does not contain exactly one
			well-formed tree.

		>>> Tree.parse('(S (NP x) (VP y))', parse_leaf=str.upper)
		Tree('S', [Tree('NP', ['X']), Tree('VP', ['Y'])])"""
		stack = [(None, [])]  # list of (label, children) tuples
		for match in TOKENRE.finditer(s):
			token = match.group()
			if token[0] == '(':  # Beginning of a tree/subtree
				if len(stack) == 1 and len(stack[0][1]) > 0:
					cls._parse_error(s, match, 'end-of-string')
				stack.append((match.group(1) or '', []))
			elif token == ')':  # End of a tree/subtree
				if len(stack) == 1:
					if len(stack[0][1]) == 0:
						cls._parse_error(s, match, '(')
					else:
						cls._parse_error(s, match, 'end-of-string')
				label, children = stack.pop()
				stack[-1][1].append(cls(label, children))
			else:  # Leaf node
				if len(stack) == 1:
					cls._parse_error(s, match, '(')
				if parse_leaf is not None:
					token = parse_leaf(token)
				stack[-1][1].append(token)
		if len(stack) > 1:
			cls._parse_error(s, 'end-of-string', ')')
		elif len(stack[0][1]) == 0:
			cls._parse_error(s, 'end-of-string', '(')
		return stack[0][1][0]

	@classmethod
	def _parse_error(cls, orig, match, expecting):
		"""Raise a friendly error message when parsing a tree string fails.

		:param orig: The string we're parsing.
		:param match: regexp match of the problem token.
		:param expecting: what we expected to see instead."""
		if match == 'end-of-string':
			pos, token = len(orig), 'end-of-string'
		else:
			pos, token = match.start(), match.group()
		msg = '%s.parse(): expected %r but got %r\n%sat index %d.' % (
			cls.__name__, expecting, token, ' ' * 12, pos)
		# Add a display showing the error token itself:
		s = orig.replace('\n', ' ').replace('\t', ' ')
		offset = pos
		if len(s) > pos + 10:
			s = s[:pos + 10] + '...'
		if pos > 10:
			s = '...' + s[pos - 10:]
			offset = 13
		msg += '\n%s"%s"\n%s^' % (' ' * 16, s, ' ' * (17 + offset))
		raise ValueError(msg)

	# === String Representations ================================
	def __repr__(self):
		childstr = ', '.join(repr(c) for c in self)
		return '%s(%r, [%s])' % (self.__class__.__name__, self.label, childstr)

	def __str__(self):
		""":returns: the tree in bracket notation on a single line."""
		result = []
		agenda = [self]
		while agenda:
			node = agenda.pop()
			if not isinstance(node, Tree):
				result.append('%s' % node)
				continue
			result.append('(%s' % node.label)
			agenda.append(')')
			if not node.children:
				agenda.append(' ')
			for child in reversed(node.children):
				agenda.extend((child, ' '))
		return ''.join(result)


def readtree(text, downcase=False):
	"""Parse a single tree in bracket notation with words as leaves.

	:param downcase: if True, convert all words to lower case; labels are
		left alone.
	:raises ValueError: if text is not a well-formed tree.

	>>> print(readtree('(S1 (S (NP (NNP Mary)) (VP (VBZ runs))))', True))
	(S1 (S (NP (NNP mary)) (VP (VBZ runs))))
	"""
	return Tree.parse(text, parse_leaf=str.lower if downcase else None)


__all__ = ['Tree', 'readtree']
