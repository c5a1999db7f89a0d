# Sphinx configuration for the LifeHistory documentation.
#
# The modules are documented in literate style, so most of
# the content comes straight from their docstrings through autodoc.

project = 'LifeHistory'
copyright = '2026, LifeHistory contributors'
author = 'LifeHistory contributors'

extensions = [
    'sphinx.ext.autodoc',
    'sphinx.ext.autosummary',
    'sphinx.ext.doctest',
    'sphinx.ext.intersphinx',
]

autosummary_generate = True
autodoc_member_order = 'bysource'
autodoc_default_options = {
    'members': True,
    'show-inheritance': True,
}
templates_path = ['_templates']
exclude_patterns = ['_build']

intersphinx_mapping = {
    'python': ('https://docs.python.org/3', None),
    'pyarrow': ('https://arrow.apache.org/docs', None),
}

html_theme = 'nature'
html_static_path = ['_static']
html_title = 'LifeHistory, tidy life-history datasets'
