"""Reporting module - run artifacts"""
from .reporters import (
	FileReporter,
	HealingInsightsReporter,
	HtmlReporter,
	JsonReporter,
	MarkdownReporter,
	Reporter,
	default_reporters,
	write_reports,
)

__all__ = [
	'FileReporter',
	'HealingInsightsReporter',
	'HtmlReporter',
	'JsonReporter',
	'MarkdownReporter',
	'Reporter',
	'default_reporters',
	'write_reports',
]
