"""Labeled bracket evaluation of candidate parses against gold trees.

Follows the conventions of EVALB [1]: a tree is reduced to a multiset of
edges ``(label, start, end)``, punctuation is removed from the yield, root
labels are ignored and some labels may be declared equivalent. Unlike
EVALB's default, preterminals count as edges unless the ``PRETERMINALS``
parameter is set to 0.

[1] http://nlp.cs.nyu.edu/evalb/"""
import io
from collections import defaultdict, Counter
import numpy
from .tree import Tree

ROOTLABELS = ('', 'S1', 'ROOT', 'TOP')
PUNCTUATION = (',', ':', '``', "''", '.', '-NONE-')


def readparam(filename):
	"""Read an EVALB-style parameter file and return a dictionary.

	Without a file, root labels and punctuation are deleted and ADVP/PRT
	are equivalent. A file specifies all labels to delete and equate.

	>>> param = readparam(None)
	>>> param['LABELED'], param['PRETERMINALS'], 'TOP' in param['DELETE_LABEL']
	(1, 1, True)
	>>> param['EQ_LABEL']['ADVP'] == param['EQ_LABEL']['PRT']
	True"""
	validkeysonce = ('LABELED', 'PRETERMINALS')
	param = {'LABELED': 1, 'PRETERMINALS': 1,
			'DELETE_LABEL': set(), 'EQ_LABEL': set()}
	if filename is None:
		param['DELETE_LABEL'].update(ROOTLABELS + PUNCTUATION)
		param['EQ_LABEL'].add(('ADVP', 'PRT'))
	seen = set()
	for a in io.open(filename, encoding='utf8') if filename else ():
		line = a.strip()
		if line and not line.startswith('#'):
			try:
				key, val = line.split(None, 1)
			except ValueError:
				raise ValueError('parameter %s requires a value' % line)
			if key in validkeysonce:
				if key in seen:
					raise ValueError('cannot declare %s twice' % key)
				seen.add(key)
				param[key] = int(val)
			elif key == 'DELETE_LABEL':
				param[key].add(val)
			elif key == 'EQ_LABEL':
				try:
					b, c = val.split()
				except ValueError:
					raise ValueError('%s requires two values' % key)
				param[key].add((b, c))
			else:
				raise ValueError('unrecognized parameter key: %s' % key)
	# from pairs [('A', 'B'), ('B', 'C')] to a mapping of all elements
	# to their representative: {'A': 'A', 'B': 'A', 'C': 'A'}
	param['EQ_LABEL'] = {x: k
			for k, eqclass in transitiveclosure(param['EQ_LABEL']).items()
				for x in eqclass}
	return param


def transitiveclosure(eqpairs):
	"""Transitive closure of (undirected) EQ relations with DFS.

	Given a sequence of pairs denoting an equivalence relation,
	produce a dictionary with equivalence classes as values and
	arbitrary members of those classes as keys.

	>>> result = transitiveclosure({('A', 'B'), ('B', 'C')})
	>>> len(result)
	1
	>>> k, v = result.popitem()
	>>> k in ('A', 'B', 'C') and v == {'A', 'B', 'C'}
	True"""
	edges = defaultdict(set)
	for a, b in eqpairs:
		edges[a].add(b)
		edges[b].add(a)
	eqclasses = {}
	seen = set()
	for elem in list(edges):
		if elem in seen:
			continue
		seen.add(elem)
		eqclasses[elem] = {elem}
		agenda = set(edges[elem])
		while agenda:
			eqelem = agenda.pop()
			seen.add(eqelem)
			eqclasses[elem].add(eqelem)
			agenda.update(edges[eqelem] - seen)
	return eqclasses


DEFAULTPARAM = readparam(None)


def bracketings(tree, param=None):
	"""Return the multiset of labeled edges ``(label, start, end)`` of a tree.

	Word positions exclude words of deleted preterminals (punctuation);
	nodes with deleted labels or an empty yield are not edges.

	>>> tree = Tree('(ROOT (S (NP x) (VP (V y) (. .))))')
	>>> for (label, start, end), cnt in sorted(bracketings(tree).items()):
	...		print(label, start, end, cnt)
	NP 0 1 1
	S 0 2 1
	V 1 2 1
	VP 1 2 1"""
	if param is None:
		param = DEFAULTPARAM
	delete = param['DELETE_LABEL']
	result = Counter()
	end = 0
	starts = []
	agenda = [(tree, False)]
	while agenda:
		node, visited = agenda.pop()
		if not isinstance(node, Tree):
			end += 1
		elif not visited:
			if node.ispreterminal() and node.label in delete:
				continue
			starts.append(end)
			agenda.append((node, True))
			agenda.extend((child, False) for child in reversed(node.children))
		else:
			start = starts.pop()
			if (end > start and node.label not in delete
					and (param['PRETERMINALS'] or not node.ispreterminal())):
				label = param['EQ_LABEL'].get(node.label, node.label)
				result[label if param['LABELED'] else '', start, end] += 1
	return result


class PrecRec(object):
	"""Counts of gold, test, and common edges, with the derived scores.

	>>> pr = PrecRec.fromtrees(Tree('(S (NP x) (VP y))'), Tree('(S (NP x))'))
	>>> pr
	PrecRec(ngold=3, ntest=2, ncommon=1)
	>>> print('%.2f %.2f %.2f' % (pr.precision(), pr.recall(), pr.fscore()))
	0.50 0.33 0.40
	"""
	__slots__ = ('ngold', 'ntest', 'ncommon')

	def __init__(self, ngold=0, ntest=0, ncommon=0):
		self.ngold = ngold
		self.ntest = ntest
		self.ncommon = ncommon

	@classmethod
	def fromedges(cls, gold, test):
		"""Compare two multisets of edges, as returned by ``bracketings``."""
		return cls(sum(gold.values()), sum(test.values()),
				sum((gold & test).values()))

	@classmethod
	def fromtrees(cls, goldtree, testtree, param=None):
		"""Compare the edges of two trees."""
		return cls.fromedges(bracketings(goldtree, param),
				bracketings(testtree, param))

	def precision(self):
		"""Fraction of test edges that are correct; 0 without test edges."""
		return self.ncommon / self.ntest if self.ntest else 0.0

	def recall(self):
		"""Fraction of gold edges that are found; 0 without gold edges."""
		return self.ncommon / self.ngold if self.ngold else 0.0

	def fscore(self):
		"""Harmonic mean of precision and recall; 0 without any edges."""
		total = self.ngold + self.ntest
		return 2.0 * self.ncommon / total if total else 0.0

	def __iadd__(self, other):
		self.ngold += other.ngold
		self.ntest += other.ntest
		self.ncommon += other.ncommon
		return self

	def __add__(self, other):
		return PrecRec(self.ngold + other.ngold, self.ntest + other.ntest,
				self.ncommon + other.ncommon)

	def __eq__(self, other):
		if not isinstance(other, PrecRec):
			return NotImplemented
		return (self.ngold, self.ntest, self.ncommon) == (
				other.ngold, other.ntest, other.ncommon)

	def __repr__(self):
		return '%s(ngold=%d, ntest=%d, ncommon=%d)' % (
				self.__class__.__name__, self.ngold, self.ntest, self.ncommon)

	def __str__(self):
		return 'precision=%.4f recall=%.4f f-score=%.4f' % (
				self.precision(), self.recall(), self.fscore())


class CorpusStats(object):
	"""Accumulate 1-best and oracle scores over the sentences of a corpus.

	The 1-best parse is the parse with the highest log probability; the
	oracle parse is the parse with the highest F-score. A sentence without
	parses contributes its gold edges as missed edges.

	An instance can be passed as the callback of ``mapsentences``."""

	def __init__(self):
		self.nsentences = 0
		self.nparses = 0
		self.onebest = PrecRec()
		self.oracle = PrecRec()

	def add(self, sentence):
		"""Add the scores of a sentence that has been read with trees."""
		self.nsentences += 1
		self.nparses += sentence.nparses()
		if not sentence.nparses():
			self.onebest += PrecRec(sentence.goldnedges, 0, 0)
			self.oracle += PrecRec(sentence.goldnedges, 0, 0)
			return
		first = sentence.parses[int(numpy.argmax(sentence.logprobs()))]
		best = sentence.parses[sentence.best()]
		self.onebest += PrecRec(
				sentence.goldnedges, first.nedges, first.ncorrect)
		self.oracle += PrecRec(
				sentence.goldnedges, best.nedges, best.ncorrect)

	__call__ = add

	def summary(self):
		""":returns: a string with an overview of scores for all sentences."""
		msg = ['%s' % ' Summary '.center(35, '_'),
				'number of sentences:       %6d' % self.nsentences,
				'number of parses:          %6d' % self.nparses,
				'parses per sentence:       %6.2f' % (
					self.nparses / self.nsentences if self.nsentences else 0),
				'gold edges:                %6d' % self.onebest.ngold]
		for name, pr in (('1-best', self.onebest), ('oracle', self.oracle)):
			msg.extend([
					'%-27s%6.2f' % (name + ' recall:', 100 * pr.recall()),
					'%-27s%6.2f' % (name + ' precision:', 100 * pr.precision()),
					'%-27s%6.2f' % (name + ' f-score:', 100 * pr.fscore())])
		return '\n'.join(msg)


__all__ = ['readparam', 'transitiveclosure', 'bracketings', 'PrecRec',
		'CorpusStats', 'DEFAULTPARAM', 'ROOTLABELS', 'PUNCTUATION']
