"""Prompt templates for each documentation type.

Every builder is a pure function of (user input, customization params). The
registry is static and ordered; lookups go through the template id.
"""
from __future__ import annotations
from textwrap import dedent

from techdocs_generator.common.errors import TemplateConfigError, UnknownTemplateError
from techdocs_generator.common.schema import CustomizationParams, Template, TemplateId, Tone


def _fenced(text: str, info: str = "") -> str:
    return f"```{info}\n{text}\n```"


def _api_endpoint(user_input: str, params: CustomizationParams) -> str:
    head = dedent("""\
        Generate technical documentation for the following API endpoint.
        The documentation should be written in a {params.tone.value} tone.
        Assume the target audience for this documentation is developers working with {params.language}.
        The total length of the generated documentation should be approximately {params.max_length} words.

        The documentation must include the following sections:
        1.  **Endpoint**: The HTTP method and URL.
        2.  **Description**: A brief summary of what the endpoint does.
        3.  **Parameters**: Path, query, and body parameters, including their type and if they are required.
        4.  **Success Response**: A description of a successful response, with a status code and example JSON body.
        5.  **Error Responses**: Descriptions of potential error responses (e.g., 404 Not Found, 401 Unauthorized).
        6.  **Example Usage**: A code snippet showing how to call this endpoint.

        **API Endpoint Details:**
        """).format(params=params)
    return head + _fenced(user_input)


def _function_docstring(user_input: str, params: CustomizationParams) -> str:
    head = dedent("""\
        Generate a comprehensive docstring for the following function written in {params.language}.
        The docstring should be in a {params.tone.value} tone and formatted according to standard conventions for {params.language} (e.g., JSDoc for JavaScript, PEP 257 for Python).
        The total length should be around {params.max_length} words.

        The docstring must include:
        1.  A one-line summary of the function's purpose.
        2.  A more detailed explanation of its behavior.
        3.  Descriptions for each parameter (@param), including its type and purpose.
        4.  A description of the return value (@returns), including its type.
        5.  Any exceptions or errors it might throw (@throws).

        **Function Code:**
        """).format(params=params)
    return head + _fenced(user_input, params.language)


def _readme_section(user_input: str, params: CustomizationParams) -> str:
    head = dedent("""\
        Generate a well-formatted Markdown section for a project's README.md file.
        The tone should be {params.tone.value} and clear for developers.
        The programming language context is {params.language}.
        The section should be approximately {params.max_length} words.

        Based on the details provided, create a complete and easy-to-follow section. Use code blocks for commands and filenames.

        **Details for README Section:**
        """).format(params=params)
    return head + _fenced(user_input)


def _code_explainer(user_input: str, params: CustomizationParams) -> str:
    audience = "novice" if params.tone is Tone.BEGINNER_FRIENDLY else "developer"
    head = dedent("""\
        Explain the following block of {params.language} code step-by-step.
        The explanation should be {params.tone.value} and targeted at someone who is a {audience}.
        Provide a high-level summary first, then a detailed breakdown of the logic.
        The explanation should be roughly {params.max_length} words.

        **Code to Explain:**
        """).format(params=params, audience=audience)
    return head + _fenced(user_input, params.language)


def _architecture_overview(user_input: str, params: CustomizationParams) -> str:
    head = dedent("""\
        Generate a high-level technical architecture overview based on the provided components and their interactions.
        The overview should be written in a {params.tone.value} tone and be about {params.max_length} words.
        The primary technology stack mentioned is {params.language}, but describe all components.

        The document should cover:
        1.  **Introduction**: A brief summary of the system's purpose.
        2.  **Component Breakdown**: A description of each component and its role.
        3.  **Data Flow**: An explanation of how data moves through the system during a typical user interaction.
        4.  **Key Technologies**: A summary of the technologies used.

        **System Components and Interactions:**
        """).format(params=params)
    return head + _fenced(user_input)


PROMPT_TEMPLATES: tuple[Template, ...] = (
    Template(
        id=TemplateId.API_ENDPOINT,
        name="API Endpoint Docs",
        description="Generate comprehensive documentation for a single REST API endpoint, "
        "including request, response, and examples.",
        placeholder=(
            "e.g.,\nGET /users/{id}\n\nQuery Params:\n"
            "- include_details (boolean, optional): Include full user details.\n\n"
            'Success Response (200 OK):\n{\n  "id": "user-123",\n  "name": "Jane Doe",\n'
            '  "email": "jane.doe@example.com"\n}'
        ),
        build_prompt=_api_endpoint,
    ),
    Template(
        id=TemplateId.FUNCTION_DOCSTRING,
        name="Function Docstring",
        description="Create a detailed docstring for a code function, explaining its purpose, "
        "parameters, and return value.",
        placeholder=(
            "e.g.,\n\nfunction calculateFactorial(n) {\n  if (n < 0) return -1;\n"
            "  if (n === 0) return 1;\n  return n * calculateFactorial(n - 1);\n}"
        ),
        build_prompt=_function_docstring,
    ),
    Template(
        id=TemplateId.README_SECTION,
        name="README.md Section",
        description="Generate a specific section for a project's README file, "
        'such as "Installation" or "Usage".',
        placeholder=(
            "Section Title: Installation\n\nProject Details:\n- Node.js project\n"
            "- Package manager: npm\n- Main dependency: express\n- Run command: npm start"
        ),
        build_prompt=_readme_section,
    ),
    Template(
        id=TemplateId.CODE_EXPLAINER,
        name="Code Explainer",
        description="Explain a block of code in plain English, breaking down its logic "
        "and functionality step by step.",
        placeholder=(
            "e.g.,\n\nconst memoize = (fn) => {\n  const cache = {};\n  return (...args) => {\n"
            "    const key = JSON.stringify(args);\n    if (key in cache) {\n      return cache[key];\n"
            "    }\n    const result = fn(...args);\n    cache[key] = result;\n    return result;\n"
            "  };\n};"
        ),
        build_prompt=_code_explainer,
    ),
    Template(
        id=TemplateId.ARCHITECTURE_OVERVIEW,
        name="Architecture Overview",
        description="Generate a high-level description of a system's architecture based on "
        "its key components and their interactions.",
        placeholder=(
            "Components:\n- React Frontend (UI)\n- Node.js/Express Backend (API Gateway)\n"
            "- PostgreSQL Database (Data Storage)\n- Redis (Caching)\n\nInteractions:\n"
            "- Frontend calls Backend API for data.\n"
            "- Backend queries PostgreSQL for primary data and Redis for cached data.\n"
            "- All services are containerized with Docker."
        ),
        build_prompt=_architecture_overview,
    ),
)

_BY_ID: dict[TemplateId, Template] = {t.id: t for t in PROMPT_TEMPLATES}


def list_templates() -> list[Template]:
    """Return templates in display order."""
    return list(PROMPT_TEMPLATES)


def get_template(template_id: TemplateId | str) -> Template:
    """
    Look up a template by id.

    Args:
        template_id: Enum member or its string value.

    Raises:
        UnknownTemplateError: If the id is not registered.
    """
    try:
        return _BY_ID[TemplateId(template_id)]
    except (ValueError, KeyError):
        raise UnknownTemplateError(str(getattr(template_id, "value", template_id))) from None


def require_template(template_id: TemplateId | str) -> Template:
    """Like get_template, but a miss is a configuration error."""
    try:
        return get_template(template_id)
    except UnknownTemplateError as e:
        raise TemplateConfigError(f"default template {template_id!r} is not registered") from e


def build_prompt(template_id: TemplateId | str, user_input: str, params: CustomizationParams) -> str:
    """
    Render the prompt for a template.

    Args:
        template_id: Template to use.
        user_input: Raw user text, inserted verbatim.
        params: Customization parameters.

    Returns:
        Finished prompt string.
    """
    return get_template(template_id).build_prompt(user_input, params)
