"""Per-language project structure builders.

Takes a ``GenerationRequest`` and the ``ParsedRecord`` recovered from a model
response and assembles the in-memory ``ProjectStructure`` for one project:
the rendered entry file, a manifest, a README, language-specific config files
and any ``additionalFiles`` from the response.  Nothing touches the
filesystem here; see :mod:`mcp_builder.scaffolder.materializer`.
"""

from __future__ import annotations

import json
from typing import Any, ClassVar, Optional

from mcp_builder.parser.models import GenerationRequest, Language, ParsedRecord, Transport
from mcp_builder.utils import print_info

from .catalogue import BOOTSTRAPS, TRANSPORT_IMPORTS
from .models import ProjectStructure, TemplateCategory
from .templates import TemplateRegistry, default_registry


# ---------------------------------------------------------------------------
# Dependency defaults
# ---------------------------------------------------------------------------

NODE_FRAMEWORK_DEPENDENCY = ("@modelcontextprotocol/sdk", "^0.5.0")
PYTHON_FRAMEWORK_DEPENDENCY = ("mcp", ">=1.0.0")

NODE_SSE_DEPENDENCIES: dict[str, str] = {"express": "^4.18.2"}
PYTHON_SSE_DEPENDENCIES: dict[str, str] = {"starlette": ">=0.27.0", "uvicorn": ">=0.23.0"}

MANIFEST_KEYWORDS = ["mcp", "server", "model-context-protocol"]

TSCONFIG: dict[str, Any] = {
    "compilerOptions": {
        "target": "ES2022",
        "module": "ESNext",
        "moduleResolution": "node",
        "outDir": "./dist",
        "rootDir": "./",
        "strict": True,
        "esModuleInterop": True,
        "skipLibCheck": True,
        "forceConsistentCasingInFileNames": True,
        "declaration": True,
        "declarationMap": True,
        "sourceMap": True,
    },
    "include": ["**/*.ts"],
    "exclude": ["node_modules", "dist"],
}

NODE_GITIGNORE = """\
node_modules/
dist/
*.log
npm-debug.log*
.env
.DS_Store
"""

PYTHON_GITIGNORE = """\
__pycache__/
*.py[cod]
*$py.class
*.so
.Python
build/
develop-eggs/
dist/
downloads/
eggs/
.eggs/
lib/
lib64/
parts/
sdist/
var/
wheels/
*.egg-info/
.installed.cfg
*.egg
MANIFEST
.env
.venv
env/
venv/
ENV/
env.bak/
venv.bak/
.pytest_cache/
.coverage
htmlcov/
.tox/
.cache
nosetests.xml
coverage.xml
*.cover
.hypothesis/
"""


# ---------------------------------------------------------------------------
# Category selection
# ---------------------------------------------------------------------------


def _mentions(record: ParsedRecord, key: str) -> bool:
    files = record.additional_files or {}
    return key in record.server_code or bool(files.get(key))


def select_category(record: ParsedRecord) -> TemplateCategory:
    """Guess which template category fits *record*.

    Plain substring checks on the server code and ``additional_files`` keys.
    This is a rough signal, not a parse of the code.
    """
    has_tools = _mentions(record, "tools")
    has_resources = _mentions(record, "resources")
    has_prompts = _mentions(record, "prompts")

    if has_tools and has_resources and has_prompts:
        return TemplateCategory.ADVANCED
    if has_tools:
        return TemplateCategory.TOOLS
    if has_resources:
        return TemplateCategory.RESOURCES
    if has_prompts:
        return TemplateCategory.PROMPTS
    return TemplateCategory.BASIC


def requirement_line(name: str, version: str) -> str:
    """Convert an npm-style version range into a ``requirements.txt`` line.

    Examples::

        requirement_line("httpx", "^0.27")   -> "httpx>=0.27"
        requirement_line("httpx", "~0.27")   -> "httpx~=0.27"
        requirement_line("httpx", "0.27.0")  -> "httpx==0.27.0"
        requirement_line("httpx", "latest")  -> "httpx"
    """
    constraint = version.strip()
    if constraint in ("", "*", "latest"):
        return name
    if constraint.startswith("^"):
        return f"{name}>={constraint[1:]}"
    if constraint.startswith("~") and not constraint.startswith("~="):
        return f"{name}~={constraint[1:]}"
    if constraint[0] in "<>=!~":
        return f"{name}{constraint}"
    return f"{name}=={constraint}"


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


class LanguageBuilder:
    """Assembles the file set for one target language.

    Subclasses declare the entry file, directories and run commands, and
    provide the manifest and any extra config files.
    """

    language: ClassVar[Language]
    entry_file: ClassVar[str]
    manifest_file: ClassVar[str] = "package.json"
    directories: ClassVar[tuple[str, ...]] = ("src",)
    install_commands: ClassVar[tuple[str, ...]] = ("npm install",)
    run_command: ClassVar[str] = "npm start"
    client_command: ClassVar[str] = "node"
    client_args: ClassVar[tuple[str, ...]] = ()
    sse_port: ClassVar[int] = 3001

    def __init__(self, registry: Optional[TemplateRegistry] = None) -> None:
        self.registry = registry or default_registry()

    # -- Public API --------------------------------------------------------

    def build(self, request: GenerationRequest, record: ParsedRecord) -> ProjectStructure:
        """Return the full project structure for *request* and *record*.

        ``additional_files`` from the record are merged last and may replace
        any generated file.
        """
        structure = ProjectStructure()
        for directory in self.directories:
            structure.add_directory(directory)

        structure.files[self.entry_file] = self.render_entry(request, record)
        structure.files[self.manifest_file] = self.manifest(request, record)
        structure.files["README.md"] = self.readme(request, record)
        structure.files.update(self.extra_files(request, record))

        if record.additional_files:
            structure.files.update(record.additional_files)
        return structure

    def template_name(self, record: ParsedRecord) -> str:
        return self.registry.template_name(self.language, select_category(record))

    def render_entry(self, request: GenerationRequest, record: ParsedRecord) -> str:
        """Render the entry file from the category template for *record*."""
        variables = self.template_variables(request, record)
        variables["BOOTSTRAP"] = self.registry.render_string(
            BOOTSTRAPS[(self.language, request.transport)], variables, self.language
        )
        name = self.template_name(record)
        print_info(f"Rendering {self.entry_file} from template {name}")
        return self.registry.render(name, variables)

    def template_variables(self, request: GenerationRequest, record: ParsedRecord) -> dict[str, Any]:
        files = record.additional_files or {}
        return {
            "SERVER_NAME": request.project_name,
            "DESCRIPTION": request.description,
            "TRANSPORT": request.transport.value,
            "SERVER_CODE": record.server_code,
            "TOOLS": files.get("tools") or "",
            "RESOURCES": files.get("resources") or "",
            "PROMPTS": files.get("prompts") or "",
            "CUSTOM_CODE": files.get("customCode") or "",
            "TRANSPORT_IMPORTS": TRANSPORT_IMPORTS[(self.language, request.transport)],
        }

    # -- Generated files ---------------------------------------------------

    def manifest(self, request: GenerationRequest, record: ParsedRecord) -> str:
        raise NotImplementedError

    def extra_files(self, request: GenerationRequest, record: ParsedRecord) -> dict[str, str]:
        return {}

    def client_config(self, request: GenerationRequest) -> dict[str, Any]:
        """Return the ``mcpServers`` entry a client needs to reach the server."""
        if request.transport == Transport.SSE:
            entry: dict[str, Any] = {"url": f"http://localhost:{self.sse_port}/sse"}
        else:
            entry = {"command": self.client_command, "args": list(self.client_args)}
        return {"mcpServers": {request.project_name: entry}}

    def readme(self, request: GenerationRequest, record: ParsedRecord) -> str:
        """Build README.md; a synthesized usage example is left out."""
        install = "\n".join(self.install_commands)
        config = json.dumps(self.client_config(request), indent=2)

        sections = [
            f"# {request.project_name}\n\n{request.description}",
            f"## Installation\n\n```bash\n{install}\n```",
            f"## Usage\n\n```bash\n{self.run_command}\n```",
        ]
        if request.transport == Transport.SSE:
            sections.append(
                "The server listens for Server-Sent Events on "
                f"`http://localhost:{self.sse_port}/sse` (set `PORT` to change it)."
            )
        sections.append(
            "## Configuration\n\n"
            "Add this server to your MCP client configuration:\n\n"
            f"```json\n{config}\n```"
        )
        if record.usage_example and not record.is_synthesized("usage_example"):
            sections.append(f"## Usage Example\n\n{record.usage_example.strip()}")
        sections.append("## License\n\nMIT")
        return "\n\n".join(sections) + "\n"

    # -- Dependency merging ------------------------------------------------

    @staticmethod
    def merge_dependencies(
        defaults: dict[str, str],
        requested: Optional[dict[str, str]],
        pinned: Optional[tuple[str, str]] = None,
    ) -> dict[str, str]:
        """Merge *requested* over *defaults*; *pinned* always wins and comes last."""
        merged = {**defaults, **(requested or {})}
        if pinned is not None:
            name, version = pinned
            merged.pop(name, None)
            merged[name] = version
        return merged


class NodeBuilder(LanguageBuilder):
    """Shared package.json handling for the TypeScript and JavaScript builders."""

    main: ClassVar[str] = "server.js"
    default_scripts: ClassVar[dict[str, str]] = {"start": "node server.js"}
    default_dev_dependencies: ClassVar[dict[str, str]] = {}
    sse_dev_dependencies: ClassVar[dict[str, str]] = {}

    def manifest(self, request: GenerationRequest, record: ParsedRecord) -> str:
        sse = request.transport == Transport.SSE
        dependencies = self.merge_dependencies(
            NODE_SSE_DEPENDENCIES if sse else {},
            record.dependencies,
            pinned=NODE_FRAMEWORK_DEPENDENCY,
        )
        dev_defaults = {**self.default_dev_dependencies, **(self.sse_dev_dependencies if sse else {})}
        dev_dependencies = self.merge_dependencies(dev_defaults, record.dev_dependencies)

        package: dict[str, Any] = {
            "name": request.project_name,
            "version": "1.0.0",
            "description": request.description,
            "main": self.main,
            "type": "module",
            "scripts": {**self.default_scripts, **(record.scripts or {})},
            "dependencies": dependencies,
        }
        if dev_dependencies:
            package["devDependencies"] = dev_dependencies
        package["keywords"] = list(MANIFEST_KEYWORDS)
        package["author"] = ""
        package["license"] = "MIT"
        return json.dumps(package, indent=2) + "\n"

    def extra_files(self, request: GenerationRequest, record: ParsedRecord) -> dict[str, str]:
        return {".gitignore": NODE_GITIGNORE}


class TypeScriptBuilder(NodeBuilder):
    language = Language.TYPESCRIPT
    entry_file = "server.ts"
    directories = ("src", "dist")
    install_commands = ("npm install", "npm run build")
    client_args = ("dist/server.js",)
    main = "dist/server.js"
    default_scripts = {
        "build": "tsc",
        "start": "node dist/server.js",
        "dev": "tsc --watch",
    }
    default_dev_dependencies = {"@types/node": "^20.0.0", "typescript": "^5.0.0"}
    sse_dev_dependencies = {"@types/express": "^4.17.21"}

    def extra_files(self, request: GenerationRequest, record: ParsedRecord) -> dict[str, str]:
        return {
            "tsconfig.json": json.dumps(TSCONFIG, indent=2) + "\n",
            **super().extra_files(request, record),
        }


class JavaScriptBuilder(NodeBuilder):
    language = Language.JAVASCRIPT
    entry_file = "server.js"
    client_args = ("server.js",)


class PythonBuilder(LanguageBuilder):
    language = Language.PYTHON
    entry_file = "server.py"
    manifest_file = "requirements.txt"
    install_commands = ("python -m venv .venv", "source .venv/bin/activate", "pip install -r requirements.txt")
    run_command = "python server.py"
    client_command = "python"
    client_args = ("server.py",)
    sse_port = 8000

    default_dependencies: ClassVar[dict[str, str]] = {"pydantic": ">=2.0"}

    def manifest(self, request: GenerationRequest, record: ParsedRecord) -> str:
        defaults = dict(self.default_dependencies)
        if request.transport == Transport.SSE:
            defaults.update(PYTHON_SSE_DEPENDENCIES)
        dependencies = self.merge_dependencies(
            defaults, record.dependencies, pinned=PYTHON_FRAMEWORK_DEPENDENCY
        )
        lines = [requirement_line(name, version) for name, version in dependencies.items()]
        if record.dev_dependencies:
            lines.append("")
            lines.append("# Development dependencies")
            lines.extend(
                requirement_line(name, version) for name, version in record.dev_dependencies.items()
            )
        return "\n".join(lines) + "\n"

    def extra_files(self, request: GenerationRequest, record: ParsedRecord) -> dict[str, str]:
        return {".gitignore": PYTHON_GITIGNORE}


BUILDERS: dict[Language, type[LanguageBuilder]] = {
    Language.TYPESCRIPT: TypeScriptBuilder,
    Language.JAVASCRIPT: JavaScriptBuilder,
    Language.PYTHON: PythonBuilder,
}


def build_structure(
    request: GenerationRequest,
    record: ParsedRecord,
    registry: Optional[TemplateRegistry] = None,
) -> ProjectStructure:
    """Dispatch to the builder for ``request.language`` and build the structure."""
    builder = BUILDERS[request.language](registry)
    return builder.build(request, record)
