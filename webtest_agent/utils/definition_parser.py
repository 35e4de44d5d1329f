"""
Test Parser - turn a plain-text test definition into a ParsedTest

Format (line oriented):

    TEST: login-001
    TITLE: User can sign in
    URL: https://example.com/login
    TAGS: smoke, auth
    PRECONDITIONS:
    - A registered user exists
    STEPS:
    1. Navigate to https://example.com/login
    2. Type the username
    ASSERTIONS:
    - Dashboard is visible

Blocks (PRECONDITIONS, STEPS, ASSERTIONS) run until a blank line or the end
of the text.
"""
import logging
import re
from pathlib import Path
from typing import List, Optional, Union

from webtest_agent.views import ParsedTest, ParsedTestStep

logger = logging.getLogger(__name__)

_STEP_LINE = re.compile(r"^(\d+)\.\s*(.+)$")


class TestDefinitionError(ValueError):
	"""Exception raised when a test definition is missing required fields."""
	__test__ = False


def _capture(content: str, label: str) -> Optional[str]:
	match = re.search(rf"^{label}:\s*(.+)$", content, re.MULTILINE)
	if not match:
		return None
	return match.group(1).strip() or None


def _capture_block(content: str, label: str) -> Optional[str]:
	match = re.search(rf"{label}:\n([\s\S]*?)(?:\n\n|\Z)", content, re.IGNORECASE)
	if not match:
		return None
	return match.group(1).strip()


def _parse_list(block: Optional[str]) -> List[str]:
	if not block:
		return []
	items = [re.sub(r"^[-\s]+", "", part).strip() for part in block.split("\n-")]
	return [item for item in items if item]


def _parse_steps(block: Optional[str]) -> List[ParsedTestStep]:
	if not block:
		return []
	steps = []
	for line in block.split("\n"):
		match = _STEP_LINE.match(line.strip())
		if match:
			steps.append(ParsedTestStep(index=int(match.group(1)), description=match.group(2)))
	return steps


class TestParser:
	"""Parses test definitions (text or *.txt files)"""
	__test__ = False

	def parse(self, content: str) -> ParsedTest:
		"""
		Parse one test definition

		Raises:
			TestDefinitionError: If TEST or TITLE is missing
		"""
		content = content.replace("\r\n", "\n")
		test_id = _capture(content, "TEST")
		title = _capture(content, "TITLE")
		if not test_id or not title:
			raise TestDefinitionError("Test definition missing TEST or TITLE")

		tags_line = _capture(content, "TAGS")
		tags = re.split(r",\s*", tags_line) if tags_line else []

		return ParsedTest(
			id=test_id,
			title=title,
			url=_capture(content, "URL"),
			preconditions=_parse_list(_capture_block(content, "PRECONDITIONS")),
			steps=_parse_steps(_capture_block(content, "STEPS")),
			assertions=_parse_list(_capture_block(content, "ASSERTIONS")),
			tags=[tag.strip() for tag in tags if tag.strip()],
		)

	def parse_file(self, path: Union[str, Path]) -> ParsedTest:
		"""Read and parse a definition file (UTF-8)"""
		path = Path(path)
		logger.debug(f"Parsing test definition {path}")
		return self.parse(path.read_text(encoding="utf-8"))
