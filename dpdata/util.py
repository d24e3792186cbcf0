"""Opening (compressed) corpus files."""
import os
import bz2
import sys
import gzip
import codecs
import subprocess
from contextlib import contextmanager


def which(program, exception=True):
	"""Return first match for program in search path.

	:param exception: By default, ValueError is raised when program not found.
		Pass False to return None in this case."""
	for path in os.environ.get('PATH', os.defpath).split(':'):
		if path and os.path.exists(os.path.join(path, program)):
			return os.path.join(path, program)
	if exception:
		raise ValueError('%r not found in path; please install it.' % program)


@contextmanager
def genericdecompressor(cmd, filename, encoding='utf8'):
	"""Run command line decompressor on file and return file object.

	:param encoding: if None, mode is binary; otherwise, text."""
	with subprocess.Popen(
			[which(cmd), '-d', '-c', '-q', filename],
			stdout=subprocess.PIPE, stderr=subprocess.PIPE) as proc:
		yield proc.stdout if encoding is None else codecs.getreader(
				encoding)(proc.stdout)
		# drain output after the last record, so the decompressor can exit
		_, errors = proc.communicate()
		if proc.returncode:
			raise ValueError('non-zero exit code %s from decompressor %s:\n%r'
					% (proc.returncode, cmd, errors))


def openread(filename, encoding='utf8'):
	"""Open stdin/file for reading; decompress bz2/gz/lz4/zst on-the-fly.

	The decompression method is selected by the suffix of ``filename``;
	other files are read verbatim.

	:param encoding: if None, mode is binary; otherwise, text."""
	mode = 'rb' if encoding is None else 'rt'
	if filename == '-':
		return open(sys.stdin.fileno(), mode=mode, encoding=encoding,
				closefd=False)
	if not isinstance(filename, int):
		lowered = filename.lower()
		if lowered.endswith('.bz2'):
			return bz2.open(filename, mode=mode, encoding=encoding)
		elif lowered.endswith('.gz'):
			return gzip.open(filename, mode=mode, encoding=encoding)
		elif lowered.endswith('.zst'):
			return genericdecompressor('zstd', filename, encoding)
		elif lowered.endswith('.lz4'):
			return genericdecompressor('lz4', filename, encoding)
	return openverbatim(filename, encoding)


def openverbatim(filename, encoding='utf8'):
	"""Open file for reading without any decompression."""
	mode = 'rb' if encoding is None else 'rt'
	return open(filename, mode=mode, encoding=encoding)


__all__ = ['which', 'genericdecompressor', 'openread', 'openverbatim']
