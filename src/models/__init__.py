"""
Models package for sourcegen

Contains data structures and type definitions for the generate pipeline.
"""

from .directive import Alias, Directive
from .module import Module
from .options import GenerateOptions
from .invocation import CommandInvocation, DirectiveResult, RunReport
from .state import RunState, pipeline

__all__ = [
    "Alias",
    "Directive",
    "Module",
    "GenerateOptions",
    "CommandInvocation",
    "DirectiveResult",
    "RunReport",
    "RunState",
    "pipeline",
]
