"""Read n-best parse corpora and score each parse against its gold tree.

A corpus consists of a number of sentences, followed by the sentences. Each
sentence starts with its number of parses and its gold tree; then each parse
follows with its log probability and its tree. For example::

	1
	2 (S (NP x) (VP y))
	-0.5 (S (NP x) (VP y))
	-1.2 (S (NP x))

Numbers may be separated by arbitrary whitespace, including newlines; a tree
starts at the first non-space character after its number and extends to the
end of that line. Parses are scored while they are read; see ``dpdata.eval``.

There are two ways to consume a corpus: ``readcorpus`` returns a ``Corpus``
holding all sentences in memory, while ``itersentences`` and ``mapsentences``
read one sentence at a time.

>>> from io import StringIO
>>> corpus = readcorpus(StringIO('1\\n2 (S (NP x) (VP y))\\n'
...		'-0.5 (S (NP x) (VP y))\\n-1.2 (S (NP x))\\n'))
>>> sent = corpus[0]
>>> sent.nparses(), sent.fscore(0), sent.fscore(1), sent.maxfscore
(2, 1.0, 0.4, 1.0)
"""
import re
import sys
import logging
from contextlib import contextmanager
import numpy
from .tree import readtree
from .eval import bracketings, PrecRec
from .util import openread

NONSPACE = re.compile(r'\S')
INTRE = re.compile(r'\+?[0-9]+')
FLOATRE = re.compile(
		r'[-+]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][-+]?[0-9]+)?'
		r'|inf(?:inity)?|nan)', flags=re.IGNORECASE)
CONTEXTLEN = 1000  # characters of input to show after a bad sentence header


class CorpusFormatError(ValueError):
	"""Raised when a corpus cannot be read."""


class TokenReader(object):
	"""Scan numbers and tree lines from a text stream.

	One line is buffered at a time, so there is no limit on the length of
	lines. After each number, all whitespace including newlines is skipped,
	so that the rest of the current line starts with the next token.

	>>> from io import StringIO
	>>> reader = TokenReader(StringIO('3\\n  -1.5e2 (S x)\\nrest'))
	>>> reader.readint(), reader.readfloat(), reader.restofline()
	(3, -150.0, '(S x)\\n')
	>>> reader.readint() is None
	True"""

	def __init__(self, stream):
		self.stream = stream
		self.line = ''
		self.pos = 0

	def _nextline(self):
		"""Buffer the next line; return False at end of stream."""
		self.line = self.stream.readline()
		self.pos = 0
		return self.line != ''

	def _skipspace(self):
		"""Advance to the next non-space character; False at end of stream."""
		while True:
			match = NONSPACE.search(self.line, self.pos)
			if match is not None:
				self.pos = match.start()
				return True
			if not self._nextline():
				return False

	def _readnumber(self, pattern, convert):
		if not self._skipspace():
			return None
		match = pattern.match(self.line, self.pos)
		if match is None:
			return None
		self.pos = match.end()
		self._skipspace()
		return convert(match.group())

	def readint(self):
		"""Read a non-negative integer, or return None and consume nothing
		if the next token is not one."""
		return self._readnumber(INTRE, int)

	def readfloat(self):
		"""Read a floating point number, or return None and consume nothing
		if the next token is not one."""
		return self._readnumber(FLOATRE, float)

	def restofline(self):
		"""Consume and return the rest of the current line, including its
		line ending; None at end of stream."""
		if self.pos >= len(self.line) and not self._nextline():
			return None
		result = self.line[self.pos:]
		self.pos = len(self.line)
		return result

	def skipline(self):
		"""Discard the rest of the current line."""
		self.pos = len(self.line)

	def consume(self, num):
		"""Consume and return up to ``num`` characters."""
		chunks = []
		while num > 0:
			if self.pos >= len(self.line) and not self._nextline():
				break
			chunk = self.line[self.pos:self.pos + num]
			self.pos += len(chunk)
			num -= len(chunk)
			chunks.append(chunk)
		return ''.join(chunks)


def asreader(stream):
	"""Wrap a text stream in a TokenReader, unless it already is one.

	Every record is read up to the end of a line, so a stream may be passed
	to successive reads, as long as these do not fail."""
	if isinstance(stream, TokenReader):
		return stream
	return TokenReader(stream)


def readtreeline(reader, downcase, what):
	"""Read a tree from the rest of the current line.

	:param what: description of the tree for error messages.
	:returns: the tree, or None if reading the tree failed."""
	line = reader.restofline()
	if line is None:
		logging.error('## Reading %s tree failed.\n## buffer = <end of input>',
				what)
		return None
	try:
		return readtree(line, downcase)
	except ValueError as err:
		logging.error('## Reading %s tree failed.\n## buffer = %s\n%s',
				what, line.rstrip('\r\n'), err)
		return None


class Parse(object):
	"""A candidate parse with its log probability and score.

	:ivar logprob: log probability assigned by the parser.
	:ivar nedges: number of edges in the parse.
	:ivar ncorrect: number of edges of the parse that are in the gold tree.
	:ivar fscore: F-score of the parse w.r.t. the gold tree.
	:ivar tree: the parse tree, or None if trees were ignored.

	The tree is owned by this object: a copy gets its own copy of the tree.
	The edge counts and F-score are set by ``Sentence.read()``."""
	__slots__ = ('logprob', 'nedges', 'ncorrect', 'fscore', 'tree')

	def __init__(self):
		self.logprob = 0.0
		self.nedges = 0
		self.ncorrect = 0
		self.fscore = 0.0
		self.tree = None

	def read(self, stream, downcase=False, ignoretrees=False):
		"""Read the log probability and tree of a parse.

		:param downcase: if True, convert words to lower case.
		:param ignoretrees: if True, skip the tree and leave ``tree`` None.
		:returns: True if the read succeeded."""
		self.tree = None
		reader = asreader(stream)
		logprob = reader.readfloat()
		if logprob is None:
			logging.error('## Only read 0 of 1 parse header variables')
			return False
		self.logprob = logprob
		if ignoretrees:
			reader.skipline()
			return True
		self.tree = readtreeline(reader, downcase, 'parse')
		return self.tree is not None

	def assign(self, other):
		"""Replace the contents of this parse by a copy of another parse."""
		if other is self:
			return self
		self.logprob = other.logprob
		self.nedges = other.nedges
		self.ncorrect = other.ncorrect
		self.fscore = other.fscore
		self.tree = None
		if other.tree is not None:
			self.tree = other.tree.copy(deep=True)
		return self

	def copy(self):
		"""Return a copy with its own copy of the tree."""
		return Parse().assign(self)

	__copy__ = copy

	def __deepcopy__(self, memo):
		return self.copy()

	def __eq__(self, other):
		if not isinstance(other, Parse):
			return NotImplemented
		return all(getattr(self, a) == getattr(other, a)
				for a in self.__slots__)

	def __repr__(self):
		return '%s(logprob=%r, nedges=%d, ncorrect=%d, fscore=%r, tree=%s)' % (
				self.__class__.__name__, self.logprob, self.nedges,
				self.ncorrect, self.fscore, self.tree)


class Sentence(object):
	"""A gold tree with a list of scored candidate parses.

	:ivar gold: the gold tree, or None if trees were ignored.
	:ivar goldnedges: number of edges in the gold tree.
	:ivar maxfscore: highest F-score among the parses; 0 without parses.
	:ivar parses: list of ``Parse`` objects, in the order of the input.
	:ivar param: scoring parameters (see ``dpdata.eval.readparam``);
		None for the default parameters.

	The gold tree and the parses are owned by this object: a copy gets its
	own copies of all trees."""
	__slots__ = ('gold', 'goldnedges', 'maxfscore', 'parses', 'param')

	def __init__(self):
		self.gold = None
		self.goldnedges = 0
		self.maxfscore = 0.0
		self.parses = []
		self.param = None

	def nparses(self):
		""":returns: the number of parses of this sentence."""
		return len(self.parses)

	def fscore(self, i):
		""":returns: the F-score of parse i, as computed when reading."""
		return self.parses[i].fscore

	def precrec(self, i, pr=None):
		"""Score parse i against the gold tree.

		:param pr: if given, a ``PrecRec`` object to which the counts of
			parse i are added.
		:returns: a ``PrecRec`` object with the counts of parse i, or ``pr``
			after adding these counts."""
		assert self.gold is not None, 'scoring requires a gold tree'
		assert 0 <= i < self.nparses(), 'no parse %d' % i
		assert self.parses[i].tree is not None, 'scoring requires a parse tree'
		result = PrecRec.fromtrees(self.gold, self.parses[i].tree, self.param)
		if pr is None:
			return result
		pr += result
		return pr

	def logprobs(self):
		""":returns: a numpy array with the log probability of each parse."""
		return numpy.array([parse.logprob for parse in self.parses],
				dtype=float)

	def fscores(self):
		""":returns: a numpy array with the F-score of each parse."""
		return numpy.array([parse.fscore for parse in self.parses],
				dtype=float)

	def best(self):
		""":returns: index of the first parse with the highest F-score;
			None if there are no parses."""
		if not self.parses:
			return None
		return int(numpy.argmax(self.fscores()))

	def read(self, stream, downcase=False, ignoretrees=False, param=None):
		"""Read a sentence with its gold tree and parses, and score the parses.

		When trees are ignored, nothing is scored: the edge counts and
		F-scores stay 0. If the read fails, the sentence is left partially
		populated and should be discarded.

		:param downcase: if True, convert words to lower case.
		:param ignoretrees: if True, skip all trees.
		:param param: scoring parameters; None for the defaults.
		:returns: True if the read succeeded."""
		self.gold = None
		self.goldnedges = 0
		self.maxfscore = 0.0
		self.parses = []
		self.param = param
		reader = asreader(stream)
		nparses = reader.readint()
		if nparses is None:
			context = reader.consume(CONTEXTLEN)
			logging.error('## Fatal error: Only read 0 of 1 sentence header '
					'variables.\nNext %d characters:\n%s%s', CONTEXTLEN, context,
					'' if len(context) == CONTEXTLEN else '\n--EOF--')
			return False
		goldedges = None
		if ignoretrees:
			reader.skipline()
		else:
			self.gold = readtreeline(reader, downcase, 'gold')
			if self.gold is None:
				return False
			goldedges = bracketings(self.gold, param)
			self.goldnedges = sum(goldedges.values())
		for i in range(nparses):
			parse = Parse()
			self.parses.append(parse)
			if not parse.read(reader, downcase, ignoretrees):
				logging.error('## Reading parse tree %d failed.', i)
				return False
			if goldedges is not None:
				self._score(parse, goldedges)
		return True

	def _score(self, parse, goldedges):
		"""Set the edge counts and F-score of a parse."""
		assert self.gold is not None, 'scoring requires a gold tree'
		pr = PrecRec.fromedges(goldedges, bracketings(parse.tree, self.param))
		parse.nedges = pr.ntest
		parse.ncorrect = pr.ncommon
		parse.fscore = pr.fscore()
		if parse.fscore > self.maxfscore:
			self.maxfscore = parse.fscore

	def assign(self, other):
		"""Replace the contents of this sentence by a copy of another."""
		if other is self:
			return self
		self.goldnedges = other.goldnedges
		self.maxfscore = other.maxfscore
		self.param = other.param
		self.parses = [parse.copy() for parse in other.parses]
		self.gold = None
		if other.gold is not None:
			self.gold = other.gold.copy(deep=True)
		return self

	def copy(self):
		"""Return a copy with its own copies of all trees."""
		return Sentence().assign(self)

	__copy__ = copy

	def __deepcopy__(self, memo):
		return self.copy()

	def __eq__(self, other):
		if not isinstance(other, Sentence):
			return NotImplemented
		return (self.gold == other.gold
				and self.goldnedges == other.goldnedges
				and self.maxfscore == other.maxfscore
				and self.parses == other.parses)

	def __repr__(self):
		return '%s(gold=%s, goldnedges=%d, maxfscore=%r, nparses=%d)' % (
				self.__class__.__name__, self.gold, self.goldnedges,
				self.maxfscore, self.nparses())


def _readsentences(reader, downcase, ignoretrees, param):
	"""Read the number of sentences and yield each sentence after reading it.

	:raises CorpusFormatError: when a read fails."""
	nsentences = reader.readint()
	if nsentences is None:
		logging.error('## Failed to read number of sentences at start of file.')
		raise CorpusFormatError('missing number of sentences')
	for n in range(nsentences):
		sentence = Sentence()
		if not sentence.read(reader, downcase, ignoretrees, param):
			logging.error('## Reading sentence tree %d failed.', n)
			raise CorpusFormatError('could not read sentence %d of %d' % (
					n, nsentences))
		yield sentence
	logging.debug('read %d sentences', nsentences)


class Corpus(object):
	"""A list of sentences with their gold trees and scored parses."""
	__slots__ = ('sentences', )

	def __init__(self, sentences=None):
		self.sentences = list(sentences or ())

	def nsentences(self):
		""":returns: the number of sentences."""
		return len(self.sentences)

	def maxfscores(self):
		""":returns: a numpy array with the best F-score of each sentence."""
		return numpy.array([sent.maxfscore for sent in self.sentences],
				dtype=float)

	def read(self, stream, downcase=False, ignoretrees=False, param=None):
		"""Read all sentences from a stream.

		If the read fails, the sentences read so far are kept; the corpus
		should then be discarded.

		:returns: True if the read succeeded."""
		self.sentences = []
		try:
			for sentence in _readsentences(
					asreader(stream), downcase, ignoretrees, param):
				self.sentences.append(sentence)
		except CorpusFormatError:
			return False
		return True

	def __len__(self):
		return len(self.sentences)

	def __iter__(self):
		return iter(self.sentences)

	def __getitem__(self, n):
		return self.sentences[n]


@contextmanager
def opensource(source, opener=openread):
	"""Yield a text stream for source.

	:param source: a resource name, opened with ``opener`` and closed
		afterwards; or an open stream, which is left open.
	:param opener: a function returning a context manager for a text stream
		given a name; e.g., ``openread`` (decompresses according to the
		file name) or ``dpdata.util.openverbatim``."""
	if isinstance(source, str):
		with opener(source) as stream:
			yield stream
	else:
		yield source


def readcorpus(source, downcase=False, ignoretrees=False, param=None,
		opener=openread):
	"""Read a corpus from a stream or resource name.

	:raises CorpusFormatError: if the corpus cannot be read.
	:returns: a ``Corpus`` object."""
	corpus = Corpus()
	with opensource(source, opener) as stream:
		if not corpus.read(stream, downcase, ignoretrees, param):
			raise CorpusFormatError('could not read corpus from %s' % (
					getattr(stream, 'name', source)))
	logging.info('read %d sentences', corpus.nsentences())
	return corpus


def loadcorpus(source, downcase=False, ignoretrees=False, param=None,
		opener=openread):
	"""Read a corpus, or terminate the process when this fails.

	Intended for command line tools; same arguments as ``readcorpus``."""
	try:
		return readcorpus(source, downcase, ignoretrees, param, opener)
	except (OSError, ValueError) as err:
		logging.critical('## Fatal error: %s', err)
		sys.exit(1)


def itersentences(source, downcase=False, ignoretrees=False, param=None,
		opener=openread):
	"""Read a corpus one sentence at a time.

	Only the sentence that is yielded is held in memory; the generator can be
	consumed only once.

	:raises CorpusFormatError: when a read fails.
	:yields: ``Sentence`` objects, in the order of the corpus."""
	with opensource(source, opener) as stream:
		yield from _readsentences(
				asreader(stream), downcase, ignoretrees, param)


def mapsentences(source, func, downcase=False, ignoretrees=False,
		param=None, opener=openread):
	"""Call ``func`` on every sentence of a corpus, one sentence at a time.

	:returns: the number of sentences, or None if reading the corpus failed.
		An empty corpus gives 0."""
	nsentences = 0
	sentences = itersentences(source, downcase, ignoretrees, param, opener)
	try:
		while True:
			try:
				sentence = next(sentences)
			except StopIteration:
				return nsentences
			except CorpusFormatError:
				return None
			func(sentence)
			del sentence  # release before the next sentence is read
			nsentences += 1
	finally:
		sentences.close()


__all__ = ['CorpusFormatError', 'TokenReader', 'asreader', 'readtreeline',
		'Parse', 'Sentence', 'Corpus', 'opensource', 'readcorpus',
		'loadcorpus', 'itersentences', 'mapsentences']
