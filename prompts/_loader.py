"""
Prompt Loader - Load and format prompts from markdown files.

This module provides a clean way to manage LLM prompts:
1. Prompts are stored as .md files for easy editing
2. Support for variable substitution using {variable_name} syntax
3. Caching to avoid repeated file reads
"""

import re
from pathlib import Path
from typing import Optional, Dict, Any

from loguru import logger


_VARIABLE = re.compile(r"(?<!\{)\{([a-zA-Z_][a-zA-Z0-9_]*)\}(?!\})")


class PromptLoader:
    """
    Load and format prompts from markdown files.

    Prompts are stored in the same directory as this module.
    Each prompt is a .md file with placeholders like {variable_name}.

    Example:
        loader = PromptLoader()

        # Get raw prompt
        template = loader.get("chat_simple")

        # Get formatted prompt with variables
        prompt = loader.format("chat_intel",
            audience="CMO",
            audience_context="Focus on board-level implications..."
        )
    """

    # Singleton instance
    _instance: Optional["PromptLoader"] = None

    def __new__(cls) -> "PromptLoader":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self._prompts_dir = Path(__file__).parent
        self._cache: Dict[str, str] = {}
        self._initialized = True

        logger.debug(f"PromptLoader initialized with prompts dir: {self._prompts_dir}")

    @property
    def prompts_dir(self) -> Path:
        return self._prompts_dir

    def get(self, prompt_name: str) -> str:
        """
        Get a prompt template by name.

        Args:
            prompt_name: Name of the prompt (without .md extension)

        Returns:
            Raw prompt template string

        Raises:
            FileNotFoundError: If prompt file doesn't exist
        """
        if prompt_name in self._cache:
            return self._cache[prompt_name]

        prompt_path = self._prompts_dir / f"{prompt_name}.md"

        if not prompt_path.exists():
            raise FileNotFoundError(
                f"Prompt file not found: {prompt_path}\n"
                f"Available prompts: {self.list_prompts()}"
            )

        content = prompt_path.read_text(encoding="utf-8").strip()
        self._cache[prompt_name] = content

        logger.debug(f"Loaded prompt: {prompt_name} ({len(content)} chars)")
        return content

    def format(self, prompt_name: str, **kwargs: Any) -> str:
        """
        Get a prompt and format it with variables.

        Raises:
            ValueError: If a variable used by the template is not provided
        """
        template = self.get(prompt_name)

        try:
            return template.format(**kwargs)
        except KeyError as e:
            logger.error(f"Missing variable in prompt '{prompt_name}': {e}")
            logger.debug(f"Provided variables: {list(kwargs.keys())}")
            raise ValueError(
                f"Missing required variable {e} for prompt '{prompt_name}'"
            ) from e

    def list_prompts(self) -> list[str]:
        return sorted(
            f.stem for f in self._prompts_dir.glob("*.md")
            if f.stem != "README"
        )

    def reload(self, prompt_name: str = None) -> None:
        """Clear cache to reload prompts from disk."""
        if prompt_name:
            self._cache.pop(prompt_name, None)
            logger.debug(f"Cleared cache for prompt: {prompt_name}")
        else:
            self._cache.clear()
            logger.debug("Cleared all prompt cache")

    def get_variables(self, prompt_name: str) -> list[str]:
        """Unique {variable} names in a template, in order of appearance."""
        matches = _VARIABLE.findall(self.get(prompt_name))
        return list(dict.fromkeys(matches))


# ============================================
# CONVENIENCE FUNCTIONS
# ============================================

_loader: Optional[PromptLoader] = None


def _get_loader() -> PromptLoader:
    global _loader
    if _loader is None:
        _loader = PromptLoader()
    return _loader


def get_prompt(prompt_name: str, **kwargs: Any) -> str:
    """
    Convenience function to get and format a prompt.

    Example:
        from prompts import get_prompt

        prompt = get_prompt("briefings",
            audience="CMO",
            audience_context="...",
            limit=6,
            date="19.10.2026"
        )
    """
    loader = _get_loader()

    if kwargs:
        return loader.format(prompt_name, **kwargs)
    return loader.get(prompt_name)


def list_prompts() -> list[str]:
    return _get_loader().list_prompts()


def reload_prompts() -> None:
    _get_loader().reload()
