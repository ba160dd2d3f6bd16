"""CodeBuild buildspec rendering."""

import json

from cfninit.configs.topology import BuildRecipe


def render_buildspec(recipe: BuildRecipe) -> str:
    """
    Render a build recipe as buildspec text.

    CodeBuild parses buildspecs as YAML; JSON is valid YAML, so the
    recipe is emitted as JSON to keep key order and quoting exact.
    """
    return json.dumps(recipe.to_buildspec(), indent=2)
