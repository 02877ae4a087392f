"""
Hebe - cluster operator utilities

A small toolkit for poking at HTTP services from the command line,
built around a chainable HTTP request agent. Ships Elasticsearch
``_cat`` shortcuts and a general purpose request command.
"""

__version__ = "0.1.0"
__author__ = "Hebe contributors"
