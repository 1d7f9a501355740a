"""
Capability Profiles - Describe a target platform's capabilities in YAML.

A profile is a YAML file, or a markdown file with YAML frontmatter:

```yaml
name: pixel-android-13
description: Test device profile
api_level: 33
capabilities:
  precise_location_choice: false   # overrides the api_level default
```

`api_level` gives the baseline flags and `capabilities` overrides single flags.
A profile with neither reports a platform without any gated capability.
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from ..groups.constants import Capabilities
from ..permission.errors import ConfigError


@dataclass
class CapabilityProfile:
    """Parsed capability profile.

    Attributes:
        name: Profile name (from the file, or the filename)
        description: Human-readable description
        api_level: Platform API level, if the profile names one
        capabilities: Resolved capability flags
        file_path: Path to the source file
    """
    name: str
    description: str = ""
    api_level: Optional[int] = None
    capabilities: Capabilities = Capabilities()
    file_path: Optional[str] = None


class ProfileParser:
    """Parse capability profiles from YAML or markdown frontmatter.

    Example:
        parser = ProfileParser()
        profile = parser.parse_file("profiles/android13.yaml")
        print(profile.capabilities.granular_media)  # True
    """

    FRONTMATTER_PATTERN = re.compile(
        r'^---\s*\n(.*?)\n---\s*\n',
        re.DOTALL
    )

    def parse_file(self, file_path: str) -> CapabilityProfile:
        """Parse a profile from a file.

        Raises:
            ConfigError: If the file is missing, unreadable or invalid
        """
        path = Path(file_path)
        if not path.exists():
            raise ConfigError("Capability profile not found", path)

        try:
            with open(path, 'r', encoding='utf-8') as f:
                content = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigError(f"Cannot read capability profile ({e})", path) from e

        return self.parse_content(content, path.stem, str(path))

    def parse_content(
        self,
        content: str,
        name: str,
        file_path: Optional[str] = None
    ) -> CapabilityProfile:
        """Parse a profile from text.

        Args:
            content: YAML document, or markdown with YAML frontmatter
            name: Fallback profile name
            file_path: Optional source file path

        Returns:
            Parsed CapabilityProfile
        """
        data = self._load_yaml(content, file_path)

        api_level = data.get("api_level")
        if api_level is not None and (isinstance(api_level, bool) or not isinstance(api_level, int)):
            raise ConfigError(f"'api_level' must be an integer, got {api_level!r}", file_path)

        overrides = data.get("capabilities") or {}
        if not isinstance(overrides, dict):
            raise ConfigError("'capabilities' must be a mapping", file_path)

        base = Capabilities.for_api_level(api_level) if api_level is not None else Capabilities()
        try:
            Capabilities.from_dict(overrides)
        except ValueError as e:
            raise ConfigError(str(e), file_path) from e
        flags = base.to_dict()
        flags.update(overrides)

        return CapabilityProfile(
            name=str(data.get("name") or name),
            description=str(data.get("description", "")),
            api_level=api_level,
            capabilities=Capabilities(**flags),
            file_path=file_path,
        )

    def _load_yaml(self, content: str, file_path: Optional[str]) -> Dict[str, Any]:
        text, _ = self._extract_frontmatter(content)
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in capability profile ({e})", file_path) from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError("Capability profile must be a mapping", file_path)
        return data

    def _extract_frontmatter(self, content: str) -> Tuple[str, str]:
        """Split markdown frontmatter from its body; plain YAML has no body."""
        match = self.FRONTMATTER_PATTERN.match(content)
        if not match:
            return content, ""
        return match.group(1), content[match.end():]


def load_capability_profile(path: str) -> Capabilities:
    """Load the capability flags from a profile file.

    Raises:
        ConfigError: If the profile is missing or invalid
    """
    return ProfileParser().parse_file(path).capabilities
