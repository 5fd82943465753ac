# Configuration file for the Sphinx documentation builder.

# -- Project information

project = 'TQQC Sim'
copyright = '2026, TQQC Simulation Authors'
author = 'TQQC Simulation Authors'

release = '0.1'
version = '0.1.0'

import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join('../../src')))

# -- General configuration

extensions = [
    'sphinx.ext.napoleon',
    'sphinx.ext.duration',
    'sphinx.ext.doctest',
    'sphinx.ext.autodoc',
    'sphinx.ext.autosummary',
    'sphinx.ext.intersphinx',
    'sphinx.ext.todo',
]

intersphinx_mapping = {
    'python': ('https://docs.python.org/3/', None),
    'sphinx': ('https://www.sphinx-doc.org/en/master/', None),
    'numpy': ('https://numpy.org/doc/stable', None),
    'pandas': ('https://pandas.pydata.org/pandas-docs/stable', None),
    'matplotlib': ('https://matplotlib.org/stable', None),
}

autosummary_generate = True
autodoc_member_order = 'bysource'
autodoc_typehints = "both"
autodoc_typehints_format = "short"
napoleon_include_private_with_doc = True
napoleon_google_docstring = True

intersphinx_disabled_domains = ['std']

templates_path = ['_templates']
exclude_patterns = []

# -- Options for HTML output

html_theme = 'sphinx_rtd_theme'

# -- Options for EPUB output
epub_show_urls = 'footnote'


def autodoc_process_signature(app, what, name, obj, options, signature, return_annotation):
    return signature, return_annotation


def setup(app):
    app.connect("autodoc-process-signature", autodoc_process_signature)

