"""
jdk_cli.py
==========
Fluent command builders for the tools shipped inside a JDK.

Every builder collects arguments, working directory, environment and a
timeout, then either returns the argument vector (``build_command``) or
spawns the tool (``run``). Flags that need a newer JDK or another OS raise
``UnsupportedFeatureError`` as soon as they are requested.

    jdk.cli.launch_jar(Path("app.jar")).max_heap(512, "m").enable_preview().run()
    jdk.cli.jar().create_archive().file("out.jar").add_files("A.class").build_command()
"""

from __future__ import annotations

import logging
import os
import platform
import subprocess
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from jdk import JDK, executable_name
from process_execution import enforce_timeout

logger = logging.getLogger(__name__)

_BYTE_UNITS = {"": "", "b": "", "k": "k", "m": "m", "g": "g", "t": "t"}


class UnsupportedFeatureError(RuntimeError):
    """A flag is not available for this JDK version or operating system."""


def _join_paths(entries: Sequence[str | Path]) -> str:
    if not entries:
        raise ValueError("at least one path entry is required")
    return os.pathsep.join(str(entry) for entry in entries)


# ──────────────────────────────────────────────
#  Base Builder
# ──────────────────────────────────────────────

class CLIBuilder:
    """Shared state and execution for all JDK tool builders."""

    tool = ""

    def __init__(self, jdk: JDK) -> None:
        if jdk is None:
            raise ValueError("JDK cannot be None")
        self.jdk = jdk
        self.arguments: List[str] = []
        self.environment: Dict[str, str] = {}
        self.cwd: Optional[Path] = None
        self.inherit_environment = True
        self.timeout_seconds: float = 0

    # ── Common options ─────────────────────────

    def add_argument(self, arg: str) -> "CLIBuilder":
        if arg is None:
            raise ValueError("argument cannot be None")
        self.arguments.append(str(arg))
        return self

    def add_arguments(self, *args: str) -> "CLIBuilder":
        for arg in args:
            self.add_argument(arg)
        return self

    def working_directory(self, path: str | Path) -> "CLIBuilder":
        self.cwd = Path(path)
        return self

    def environment_variable(self, key: str, value: str) -> "CLIBuilder":
        if not key or value is None:
            raise ValueError("environment variable key and value are required")
        self.environment[key] = value
        return self

    def use_system_environment_variables(self, inherit: bool) -> "CLIBuilder":
        self.inherit_environment = inherit
        return self

    def timeout(self, seconds: float) -> "CLIBuilder":
        if seconds < 0:
            raise ValueError("timeout cannot be negative")
        self.timeout_seconds = seconds
        return self

    # ── Gating helpers ─────────────────────────

    def _require_major(self, minimum: int, feature: str) -> None:
        if self.jdk.version.major < minimum:
            raise UnsupportedFeatureError(
                f"{feature} requires JDK {minimum}+ (have {self.jdk.version})"
            )

    def _require_system(self, system: str, feature: str) -> None:
        if platform.system() != system:
            raise UnsupportedFeatureError(f"{feature} is only supported on {system}")

    # ── Execution ──────────────────────────────

    def executable(self) -> str:
        return str(self.jdk.executable_path(executable_name(self.tool)))

    def tool_arguments(self) -> List[str]:
        return list(self.arguments)

    def build_command(self) -> List[str]:
        return [self.executable()] + self.tool_arguments()

    def build_environment(self) -> Dict[str, str]:
        env = dict(os.environ) if self.inherit_environment else {}
        env.update(self.environment)
        return env

    def run(self) -> subprocess.Popen:
        """Spawn the tool; waits only when a timeout has been set."""
        command = self.build_command()
        logger.debug("Running %s: %s", self.tool, command)
        try:
            process = subprocess.Popen(
                command,
                cwd=str(self.cwd) if self.cwd else None,
                env=self.build_environment(),
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                stdin=subprocess.DEVNULL,
            )
        except OSError as exc:
            raise RuntimeError(f"Failed to start {self.tool} process: {exc}") from exc

        enforce_timeout(process, self.timeout_seconds, self.tool)
        return process


# ──────────────────────────────────────────────
#  java
# ──────────────────────────────────────────────

class LaunchType(Enum):
    CLASS_FILE = "class"
    JAR_FILE = "jar"
    MODULE = "module"
    SOURCE_FILE = "source"

    @property
    def flag(self) -> str:
        """Launcher flag preceding the target (empty for class and source files)."""
        return {"jar": "-jar", "module": "--module"}.get(self.value, "")


class JavaLauncherBuilder(CLIBuilder):
    """Builder for the ``java`` launcher."""

    tool = "java"

    def __init__(self, jdk: JDK, launch_type: LaunchType, target: str) -> None:
        super().__init__(jdk)
        self.launch_type = launch_type
        self.target = target
        self.program_arguments: List[str] = []
        self.console_enabled = True

    @classmethod
    def class_file(cls, jdk: JDK, path: str | Path) -> "JavaLauncherBuilder":
        if not str(path).endswith(".class"):
            raise ValueError(f"Provided path is not a .class file: {path}")
        return cls(jdk, LaunchType.CLASS_FILE, str(path))

    @classmethod
    def jar_file(cls, jdk: JDK, path: str | Path) -> "JavaLauncherBuilder":
        if not str(path).endswith(".jar"):
            raise ValueError(f"Provided path is not a .jar file: {path}")
        return cls(jdk, LaunchType.JAR_FILE, str(path))

    @classmethod
    def module(cls, jdk: JDK, module_name: str) -> "JavaLauncherBuilder":
        if not module_name:
            raise ValueError("module name cannot be empty")
        return cls(jdk, LaunchType.MODULE, module_name)

    @classmethod
    def source_file(cls, jdk: JDK, path: str | Path) -> "JavaLauncherBuilder":
        if not str(path).endswith(".java"):
            raise ValueError(f"Provided path is not a .java file: {path}")
        return cls(jdk, LaunchType.SOURCE_FILE, str(path))

    def console(self, enabled: bool) -> "JavaLauncherBuilder":
        """On Windows, ``False`` launches ``javaw.exe`` (no console window)."""
        self.console_enabled = enabled
        return self

    def program_argument(self, *args: str) -> "JavaLauncherBuilder":
        self.program_arguments.extend(str(a) for a in args)
        return self

    # ── Standard options ───────────────────────

    def classpath(self, *entries: str | Path) -> "JavaLauncherBuilder":
        return self.add_arguments("-cp", _join_paths(entries))

    def module_path(self, *entries: str | Path) -> "JavaLauncherBuilder":
        return self.add_arguments("--module-path", _join_paths(entries))

    def add_modules(self, *modules: str) -> "JavaLauncherBuilder":
        if not modules:
            raise ValueError("at least one module is required")
        return self.add_arguments("--add-modules", ",".join(modules))

    def system_property(self, key: str, value: str) -> "JavaLauncherBuilder":
        if not key:
            raise ValueError("system property key cannot be empty")
        return self.add_argument(f"-D{key}={value}")

    def enable_assertions(self, package_or_class: Optional[str] = None) -> "JavaLauncherBuilder":
        return self.add_argument(f"-ea:{package_or_class}" if package_or_class else "-ea")

    def javaagent(self, agent_path: str | Path, options: Optional[str] = None) -> "JavaLauncherBuilder":
        arg = f"-javaagent:{agent_path}"
        if options:
            arg += f"={options}"
        return self.add_argument(arg)

    def verbose(self, component: str = "class") -> "JavaLauncherBuilder":
        if component not in ("class", "module", "gc", "jni"):
            raise ValueError(f"Unknown verbose component: {component}")
        return self.add_argument(f"-verbose:{component}")

    def show_version(self) -> "JavaLauncherBuilder":
        return self.add_argument("-showversion")

    def _memory(self, flag: str, size: int, unit: str) -> "JavaLauncherBuilder":
        if size <= 0:
            raise ValueError("memory size must be positive")
        suffix = _BYTE_UNITS.get(unit.lower())
        if suffix is None:
            raise ValueError(f"Unknown memory unit: {unit}")
        return self.add_argument(f"{flag}{size}{suffix}")

    def min_heap(self, size: int, unit: str = "m") -> "JavaLauncherBuilder":
        return self._memory("-Xms", size, unit)

    def max_heap(self, size: int, unit: str = "m") -> "JavaLauncherBuilder":
        return self._memory("-Xmx", size, unit)

    def add_opens(self, module: str, package: str, *targets: str) -> "JavaLauncherBuilder":
        return self.add_arguments("--add-opens", f"{module}/{package}={','.join(targets) or 'ALL-UNNAMED'}")

    def add_exports(self, module: str, package: str, *targets: str) -> "JavaLauncherBuilder":
        return self.add_arguments("--add-exports", f"{module}/{package}={','.join(targets) or 'ALL-UNNAMED'}")

    # ── Version / OS gated options ─────────────

    def enable_preview(self) -> "JavaLauncherBuilder":
        self._require_major(12, "--enable-preview")
        return self.add_argument("--enable-preview")

    def enable_native_access(self, *modules: str) -> "JavaLauncherBuilder":
        self._require_major(16, "--enable-native-access")
        return self.add_argument(f"--enable-native-access={','.join(modules) or 'ALL-UNNAMED'}")

    def finalization(self, enabled: bool) -> "JavaLauncherBuilder":
        self._require_major(18, "--finalization")
        return self.add_argument(f"--finalization={'enabled' if enabled else 'disabled'}")

    def compact_object_headers(self) -> "JavaLauncherBuilder":
        self._require_major(25, "-XX:+UseCompactObjectHeaders")
        return self.add_argument("-XX:+UseCompactObjectHeaders")

    def start_on_first_thread(self) -> "JavaLauncherBuilder":
        self._require_system("Darwin", "-XstartOnFirstThread")
        return self.add_argument("-XstartOnFirstThread")

    # ── Command ────────────────────────────────

    def executable(self) -> str:
        windowless = not self.console_enabled and platform.system() == "Windows"
        tool = "javaw" if windowless else "java"
        return str(self.jdk.executable_path(executable_name(tool)))

    def tool_arguments(self) -> List[str]:
        args = list(self.arguments)
        if self.launch_type.flag:
            args.append(self.launch_type.flag)
        args.append(self.target)
        args.extend(self.program_arguments)
        return args


# ──────────────────────────────────────────────
#  jar
# ──────────────────────────────────────────────

class JarOperation(Enum):
    CREATE = "--create"
    LIST = "--list"
    UPDATE = "--update"
    EXTRACT = "--extract"
    VALIDATE = "--validate"
    DESCRIBE_MODULE = "--describe-module"
    GENERATE_INDEX = "--generate-index"


class JarBuilder(CLIBuilder):
    """Builder for the ``jar`` archive tool."""

    tool = "jar"

    def __init__(self, jdk: JDK) -> None:
        super().__init__(jdk)
        self.operation: Optional[JarOperation] = None
        self.index_target: Optional[str] = None
        self.file_entries: List[str] = []

    def _operation(self, operation: JarOperation) -> "JarBuilder":
        self.operation = operation
        if operation is not JarOperation.GENERATE_INDEX:
            self.index_target = None
        return self

    def create_archive(self) -> "JarBuilder":
        return self._operation(JarOperation.CREATE)

    def list_contents(self) -> "JarBuilder":
        return self._operation(JarOperation.LIST)

    def update_archive(self) -> "JarBuilder":
        return self._operation(JarOperation.UPDATE)

    def extract_archive(self) -> "JarBuilder":
        return self._operation(JarOperation.EXTRACT)

    def validate_archive(self) -> "JarBuilder":
        return self._operation(JarOperation.VALIDATE)

    def describe_module(self) -> "JarBuilder":
        return self._operation(JarOperation.DESCRIBE_MODULE)

    def generate_index(self, jar_file: str | Path) -> "JarBuilder":
        self._operation(JarOperation.GENERATE_INDEX)
        self.index_target = str(jar_file)
        return self

    def file(self, jar_file: str | Path) -> "JarBuilder":
        return self.add_arguments("--file", str(jar_file))

    def main_class(self, class_name: str) -> "JarBuilder":
        return self.add_arguments("--main-class", class_name)

    def manifest(self, manifest_path: str | Path) -> "JarBuilder":
        return self.add_arguments("--manifest", str(manifest_path))

    def no_manifest(self) -> "JarBuilder":
        return self.add_argument("--no-manifest")

    def verbose(self) -> "JarBuilder":
        return self.add_argument("--verbose")

    def release(self, version: int) -> "JarBuilder":
        if version < 9:
            raise ValueError("Release version must be 9 or greater")
        self.file_entries.extend(["--release", str(version)])
        return self

    def change_directory(self, directory: str | Path) -> "JarBuilder":
        self.file_entries.extend(["-C", str(directory)])
        return self

    def add_files(self, *files: str | Path) -> "JarBuilder":
        self.file_entries.extend(str(f) for f in files)
        return self

    def tool_arguments(self) -> List[str]:
        if self.operation is None:
            raise RuntimeError("An operation mode must be specified before running jar")
        if self.operation is JarOperation.GENERATE_INDEX:
            if not self.index_target:
                raise RuntimeError("Generate-index operation requires a target jar file")
            head = [f"{self.operation.value}={self.index_target}"]
        else:
            head = [self.operation.value]
        return head + list(self.arguments) + list(self.file_entries)


# ──────────────────────────────────────────────
#  javap
# ──────────────────────────────────────────────

class JavapBuilder(CLIBuilder):
    """Builder for the ``javap`` class file disassembler."""

    tool = "javap"

    VISIBILITY = {"public": "-public", "protected": "-protected", "package": "-package", "private": "-private"}

    def __init__(self, jdk: JDK) -> None:
        super().__init__(jdk)
        self.classes: List[str] = []

    def verbose(self) -> "JavapBuilder":
        return self.add_argument("-verbose")

    def disassemble(self) -> "JavapBuilder":
        return self.add_argument("-c")

    def signatures(self) -> "JavapBuilder":
        return self.add_argument("-s")

    def constants(self) -> "JavapBuilder":
        return self.add_argument("-constants")

    def visibility(self, level: str) -> "JavapBuilder":
        flag = self.VISIBILITY.get(level)
        if flag is None:
            raise ValueError(f"Unknown visibility: {level}")
        return self.add_argument(flag)

    def classpath(self, *entries: str | Path) -> "JavapBuilder":
        return self.add_arguments("-cp", _join_paths(entries))

    def multi_release(self, version: int) -> "JavapBuilder":
        self._require_major(9, "--multi-release")
        return self.add_arguments("--multi-release", str(version))

    def add_classes(self, *names: str | Path) -> "JavapBuilder":
        self.classes.extend(str(n) for n in names)
        return self

    def tool_arguments(self) -> List[str]:
        if not self.classes:
            raise RuntimeError("javap needs at least one class")
        return list(self.arguments) + list(self.classes)


# ──────────────────────────────────────────────
#  jps
# ──────────────────────────────────────────────

class JpsBuilder(CLIBuilder):
    """Builder for ``jps`` (lists running JVMs)."""

    tool = "jps"

    def __init__(self, jdk: JDK) -> None:
        super().__init__(jdk)
        self.host_id: Optional[str] = None

    def quiet(self) -> "JpsBuilder":
        return self.add_argument("-q")

    def main_arguments(self) -> "JpsBuilder":
        return self.add_argument("-m")

    def long_names(self) -> "JpsBuilder":
        return self.add_argument("-l")

    def jvm_arguments(self) -> "JpsBuilder":
        return self.add_argument("-v")

    def host(self, host_id: str) -> "JpsBuilder":
        self.host_id = host_id
        return self

    def tool_arguments(self) -> List[str]:
        args = list(self.arguments)
        if self.host_id:
            args.append(self.host_id)
        return args


# ──────────────────────────────────────────────
#  Factory
# ──────────────────────────────────────────────

class JDKCLI:
    """Entry point for the tool builders of one JDK (``jdk.cli``)."""

    def __init__(self, jdk: JDK) -> None:
        if jdk is None:
            raise ValueError("JDK cannot be None")
        self.jdk = jdk

    def launch_main_class(self, class_file: str | Path) -> JavaLauncherBuilder:
        return JavaLauncherBuilder.class_file(self.jdk, class_file)

    def launch_jar(self, jar_file: str | Path) -> JavaLauncherBuilder:
        return JavaLauncherBuilder.jar_file(self.jdk, jar_file)

    def launch_module(self, module_name: str) -> JavaLauncherBuilder:
        return JavaLauncherBuilder.module(self.jdk, module_name)

    def launch_source_file(self, source_file: str | Path) -> JavaLauncherBuilder:
        return JavaLauncherBuilder.source_file(self.jdk, source_file)

    def jar(self) -> JarBuilder:
        return JarBuilder(self.jdk)

    def javap(self) -> JavapBuilder:
        return JavapBuilder(self.jdk)

    def jps(self) -> JpsBuilder:
        return JpsBuilder(self.jdk)
