"""Discriminative parsing data (dpdata).

Main components:

- A reader for n-best parse corpora: each sentence carries a gold tree and
  a list of candidate parses with log probabilities.
- Scoring of every candidate against the gold tree with labeled bracket
  precision, recall and F-score, as the corpus is read.
"""
__version__ = '0.1.0'
