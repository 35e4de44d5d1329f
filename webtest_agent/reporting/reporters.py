"""
Run reporters

Each reporter renders the completed run summaries into one artifact inside
settings.artifacts_dir. Reporters only read the summaries, so they can run
concurrently.
"""
import asyncio
import html
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Sequence

from typing_extensions import Protocol, runtime_checkable

from webtest_agent.config import Settings
from webtest_agent.views import RunSummary

logger = logging.getLogger(__name__)


@runtime_checkable
class Reporter(Protocol):
	async def write(self, summaries: Sequence[RunSummary], settings: Settings) -> None:
		...


class FileReporter:
	"""Shared plumbing: render text, write it under the artifacts directory"""

	filename: str = ""

	def __init__(self, output_dir: Optional[str] = None):
		self.output_dir = output_dir

	def render(self, summaries: Sequence[RunSummary], settings: Settings) -> str:
		raise NotImplementedError

	def target_path(self, settings: Settings) -> Path:
		return Path(self.output_dir or settings.artifacts_dir) / self.filename

	async def write(self, summaries: Sequence[RunSummary], settings: Settings) -> None:
		path = self.target_path(settings)
		content = self.render(summaries, settings)
		await asyncio.to_thread(self._write_file, path, content)
		logger.info(f"📝 Wrote {path}")

	@staticmethod
	def _write_file(path: Path, content: str) -> None:
		path.parent.mkdir(parents=True, exist_ok=True)
		path.write_text(content, encoding="utf-8")


class HtmlReporter(FileReporter):
	filename = "report.html"

	def render(self, summaries: Sequence[RunSummary], settings: Settings) -> str:
		rows = "\n".join(
			f"<tr><td>{html.escape(s.test_id)}</td><td>{html.escape(s.title)}</td>"
			f"<td>{s.status}</td><td>{len(s.steps)}</td></tr>"
			for s in summaries
		)
		return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <title>Agentic Run Report</title>
  <style>
    body {{ font-family: Arial, sans-serif; margin: 2rem; }}
    table {{ border-collapse: collapse; width: 100%; }}
    th, td {{ border: 1px solid #ccc; padding: 0.5rem; text-align: left; }}
    th {{ background: #f2f2f2; }}
  </style>
</head>
<body>
  <h1>Agentic Run Report ({html.escape(settings.environment)})</h1>
  <p>Total tests: {len(summaries)}</p>
  <table>
    <thead><tr><th>ID</th><th>Title</th><th>Status</th><th>Steps</th></tr></thead>
    <tbody>{rows}</tbody>
  </table>
</body>
</html>"""


class JsonReporter(FileReporter):
	filename = "report.json"

	def render(self, summaries: Sequence[RunSummary], settings: Settings) -> str:
		payload = {
			"generated_at": datetime.now(timezone.utc).isoformat(),
			"environment": settings.environment,
			"tests": [summary.model_dump(mode="json") for summary in summaries],
		}
		return json.dumps(payload, indent=2)


class MarkdownReporter(FileReporter):
	filename = "report.md"

	def render(self, summaries: Sequence[RunSummary], settings: Settings) -> str:
		lines = [
			f"# Agentic Test Report ({settings.environment})",
			"",
			f"Total tests: {len(summaries)}",
			"",
			"| Test ID | Title | Status | Steps |",
			"| --- | --- | --- | --- |",
		]
		for summary in summaries:
			title = summary.title.replace("|", "\\|")
			lines.append(f"| {summary.test_id} | {title} | {summary.status} | {len(summary.steps)} |")
		return "\n".join(lines)


class HealingInsightsReporter(FileReporter):
	filename = "healing_insights.md"

	def render(self, summaries: Sequence[RunSummary], settings: Settings) -> str:
		lines = ["# Healing Insights", ""]
		for summary in summaries:
			healed = [result for result in summary.steps if result.self_healing_attempts > 0]
			if not healed:
				continue
			lines.append(f"## {summary.test_id} - {summary.title}")
			for result in healed:
				lines.append(f"- {result.step.label}: {result.self_healing_attempts} attempt(s)")
			lines.append("")

		if len(lines) == 2:
			lines.append("No self-healing activity recorded.")
		return "\n".join(lines)


def default_reporters() -> List[Reporter]:
	return [HtmlReporter(), JsonReporter(), MarkdownReporter(), HealingInsightsReporter()]


async def write_reports(reporters: Sequence[Reporter], summaries: Sequence[RunSummary], settings: Settings) -> None:
	"""Run every reporter concurrently; the first failure propagates after all finish"""
	results = await asyncio.gather(
		*(reporter.write(summaries, settings) for reporter in reporters),
		return_exceptions=True,
	)
	errors = [result for result in results if isinstance(result, BaseException)]
	for error in errors:
		logger.error(f"Reporter failed: {type(error).__name__}: {error}")
	if errors:
		raise errors[0]
