"""Command-line interfaces to modules."""
import logging
from getopt import gnu_getopt, GetoptError
from sys import argv, stderr
from sys import exit as sysexit

COMMANDS = {
		'stats': 'Report 1-best and oracle scores of an n-best corpus.',
		'oracle': 'Print the best parse of each sentence of an n-best corpus.',
	}
FLAGS = ('help', 'downcase', 'verbose', 'quiet')
OPTIONS = ('param=', )


def main():
	"""Expose command-line interfaces."""
	from os.path import basename
	thiscmd = basename(argv[0])
	if len(argv) == 2 and argv[1] in ('-v', '--version'):
		from dpdata import __version__
		print(__version__)
	elif len(argv) <= 1 or argv[1] not in COMMANDS:
		print('Usage: %s <command> [arguments]\n' % thiscmd, file=stderr)
		print('Command is one of:', file=stderr)
		for a, b in COMMANDS.items():
			print('   %s  %s' % (a.ljust(15), b))
		print('for additional instructions issue: %s <command> --help'
			% thiscmd, file=stderr)
	else:
		globals()[argv[1]]()


def getoptions(usage, flags=FLAGS, options=OPTIONS):
	"""Parse command line options of a subcommand; exit on errors.

	Also configures logging according to --verbose and --quiet.

	:returns: a tuple (opts, corpus, param) with a dictionary of options,
		the corpus filename, and the scoring parameters."""
	from .eval import readparam
	try:
		opts, args = gnu_getopt(argv[2:], 'h', flags + options)
	except GetoptError as err:
		print('error:', err, file=stderr)
		print(usage)
		sysexit(2)
	opts = dict(opts)
	if '--help' in opts or '-h' in opts:
		print(usage)
		sysexit(0)
	if len(args) != 1:
		print('error: Wrong number of arguments.', file=stderr)
		print(usage)
		sysexit(2)
	level = logging.INFO
	if '--verbose' in opts:
		level = logging.DEBUG
	elif '--quiet' in opts:
		level = logging.WARNING
	logging.basicConfig(level=level, format='%(message)s')
	return opts, args[0], readparam(opts.get('--param'))


def stats():
	"""Usage: dpdata stats <corpus> [options]

Read an n-best corpus one sentence at a time and report precision, recall,
and F-score of the 1-best parses (highest log probability) and of the oracle
parses (highest F-score). Compressed corpora (.bz2, .gz, .zst, .lz4) are
decompressed on-the-fly; use - to read standard input.

Options:
  --param=<file>  EVALB-style parameter file with scoring parameters.
  --downcase      Convert words to lower case.
  --verbose       Show more messages.
  --quiet         Only show warnings and errors."""
	from .corpus import mapsentences
	from .eval import CorpusStats
	opts, filename, param = getoptions(stats.__doc__)
	result = CorpusStats()
	nsentences = mapsentences(filename, result.add,
			downcase='--downcase' in opts, param=param)
	if nsentences is None:
		logging.error('## Failed to read %s', filename)
		sysexit(1)
	print(result.summary())


def oracle():
	"""Usage: dpdata oracle <corpus> [options]

Read an n-best corpus and print for each sentence a line with the sentence
number, the number of parses, the index of the parse with the highest
F-score, and its F-score. Sentences without parses have '-' as index.

Options:
  --param=<file>  EVALB-style parameter file with scoring parameters.
  --downcase      Convert words to lower case.
  --trees         Also print the best parse tree.
  --verbose       Show more messages.
  --quiet         Only show warnings and errors."""
	from .corpus import loadcorpus
	opts, filename, param = getoptions(oracle.__doc__,
			flags=FLAGS + ('trees', ))
	corpus = loadcorpus(filename, downcase='--downcase' in opts, param=param)
	for n, sent in enumerate(corpus, 1):
		best = sent.best()
		if best is None:
			print('%d\t0\t-\t%.4f' % (n, 0))
			continue
		if '--trees' in opts:
			print('%d\t%d\t%d\t%.4f\t%s' % (n, sent.nparses(), best,
					sent.fscore(best), sent.parses[best].tree))
		else:
			print('%d\t%d\t%d\t%.4f' % (n, sent.nparses(), best,
					sent.fscore(best)))


__all__ = ['main', 'getoptions', 'stats', 'oracle']
