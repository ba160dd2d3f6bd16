"""
Utility functions for the cfninit Pulumi program.

Provides naming conventions, tag factories, user data and buildspec
rendering, and output utilities.
"""

from cfninit.utils.naming import ResourceNamer
from cfninit.utils.tags import create_tags, merge_tags
from cfninit.utils.user_data import LifecycleSignal, render_user_data
from cfninit.utils.buildspec import render_buildspec
from cfninit.utils.outputs import write_outputs_to_env

__all__ = [
    "ResourceNamer",
    "create_tags",
    "merge_tags",
    "LifecycleSignal",
    "render_user_data",
    "render_buildspec",
    "write_outputs_to_env",
]
