"""Token-budgeted Markdown assembly.

Usage:
    from codefetch.markdown import AssemblyOptions, assemble

    options = AssemblyOptions(max_tokens=8000, include_tree_structure=True)
    document = await assemble(records, options)
"""

from codefetch.markdown.assembler import assemble
from codefetch.markdown.models import AssemblyOptions
from codefetch.markdown.stream import assemble_stream

__all__ = ["AssemblyOptions", "assemble", "assemble_stream"]
