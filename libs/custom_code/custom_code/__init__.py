"""
Custom Code — blocs de composants écrits par l'auteur, compilés à chaque rendu.

Usage:
    >>> from custom_code import create_default, mount, render_to_html
    >>> block = create_default()
    >>> html = render_to_html(mount(block))

Étapes exposées séparément (diagnostic, aperçu) :
    >>> from custom_code import transform, bind
    >>> lowered = transform("() => <b>hi</b>").lowered
    >>> factory = bind(lowered).value
"""
from .bind import BindResult, bind
from .element import FRAGMENT, REACT, Element, resolve
from .errors import BindError, PipelineFailure, RenderError, TransformError
from .html import render_to_html, style_to_css
from .mount import CompiledUnit, compile_block, error_node, mount
from .source import DEFAULT_SOURCE, CustomBlock, SourceEditor, create_default
from .transform import TransformResult, transform

__version__ = "0.1.0"

__all__ = [
    "CustomBlock", "SourceEditor", "create_default", "DEFAULT_SOURCE",
    "transform", "TransformResult",
    "bind", "BindResult",
    "mount", "compile_block", "CompiledUnit", "error_node",
    "Element", "FRAGMENT", "REACT", "resolve",
    "render_to_html", "style_to_css",
    "PipelineFailure", "TransformError", "BindError", "RenderError",
]
