"""setup.py for dpdata."""
import sys
from setuptools import setup

from dpdata import __version__

with open('README.rst') as inp:
	README = inp.read()

REQUIRES = [
		'numpy',
		]
METADATA = dict(name='dpdata',
		version=__version__,
		description='Reader and scorer for n-best parse corpora',
		long_description=README,
		classifiers=[
				'Development Status :: 4 - Beta',
				'Environment :: Console',
				'Intended Audience :: Science/Research',
				'License :: OSI Approved :: GNU General Public License (GPL)',
				'Operating System :: POSIX',
				'Programming Language :: Python :: 3',
				'Topic :: Text Processing :: Linguistic',
		],
		packages=['dpdata'],
		python_requires='>=3.5',
		install_requires=REQUIRES,
		extras_require={'test': ['pytest']},
		entry_points={'console_scripts': ['dpdata = dpdata.cli:main']},
	)

if __name__ == '__main__':
	if sys.version_info[:2] < (3, 5):
		raise RuntimeError('Python version 3.5+ required.')
	setup(**METADATA)
