# Sphinx configuration file

import os
import sys
sys.path.insert(0, os.path.abspath('../src'))

from bpa_backend_starter import __version__  # noqa: E402

project = 'BPA Backend Starter'
copyright = '2026, BPA Backend Starter contributors'
author = 'BPA Backend Starter contributors'
release = __version__

extensions = [
    'sphinx.ext.autodoc',
    'sphinx.ext.napoleon',
    'sphinx.ext.viewcode',
    'sphinx.ext.intersphinx',
    'sphinx_autodoc_typehints',
]

exclude_patterns = ['_build']

html_theme = 'sphinx_rtd_theme'
html_title = f'BPA Backend Starter {release}'

# The listener hooks are meant to be overridden; document them even when empty.
autodoc_default_options = {
    'members': True,
    'member-order': 'bysource',
    'undoc-members': True,
    'show-inheritance': True,
}

napoleon_google_docstring = True
napoleon_numpy_docstring = False

intersphinx_mapping = {
    'python': ('https://docs.python.org/3', None),
    'requests': ('https://requests.readthedocs.io/en/latest/', None),
    'pydantic': ('https://docs.pydantic.dev/latest/', None),
}
