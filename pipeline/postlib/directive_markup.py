"""
Directive markup used inside generated post bodies.

Grammar, embedded in otherwise plain markdown:

	:::callout{type="insight"}
	body text
	:::

	:::prompt
	copyable prompt text
	:::

	:::stat{value="42" label="sessions"}:::

Post templates build markup with callout(), prompt_block() and stat().
parse_markup() turns a body back into typed nodes so a renderer or a
check can work on structure instead of regexes.
"""

import html
import re
from dataclasses import dataclass


DIRECTIVE_RE = re.compile(
	r':::stat\{value="(?P<stat_value>[^"]+)" label="(?P<stat_label>[^"]+)"\}:::'
	r'|:::callout\{type="(?P<callout_type>\w+)"\}\n(?P<callout_body>.*?):::'
	r"|:::prompt\n(?P<prompt_body>.*?):::",
	re.DOTALL,
)
MARKER = ":::"


#============================================
@dataclass(frozen=True)
class TextNode:
	text: str


@dataclass(frozen=True)
class CalloutNode:
	kind: str
	body: str


@dataclass(frozen=True)
class PromptNode:
	body: str


@dataclass(frozen=True)
class StatNode:
	value: str
	label: str


#============================================
def callout(kind: str, body: str) -> str:
	"""
	Build a callout directive block.
	"""
	return f':::callout{{type="{kind}"}}\n{body.strip()}\n:::'


#============================================
def prompt_block(body: str) -> str:
	"""
	Build a copyable prompt directive block.
	"""
	return f":::prompt\n{body.strip()}\n:::"


#============================================
def stat(value, label: str) -> str:
	"""
	Build an inline stat badge directive.
	"""
	value_text = str(value).replace('"', "'")
	label_text = str(label).replace('"', "'")
	return f':::stat{{value="{value_text}" label="{label_text}"}}:::'


#============================================
def parse_markup(content: str) -> list:
	"""
	Split content into text and directive nodes, in document order.
	"""
	nodes = []
	position = 0
	for match in DIRECTIVE_RE.finditer(content):
		if match.start() > position:
			nodes.append(TextNode(content[position:match.start()]))
		if match.group("stat_value") is not None:
			nodes.append(StatNode(match.group("stat_value"), match.group("stat_label")))
		elif match.group("callout_type") is not None:
			nodes.append(CalloutNode(match.group("callout_type"), match.group("callout_body").strip()))
		else:
			nodes.append(PromptNode(match.group("prompt_body").strip()))
		position = match.end()
	if position < len(content):
		nodes.append(TextNode(content[position:]))
	return nodes


#============================================
def find_stray_markers(nodes: list) -> list[str]:
	"""
	Return lines of text nodes that still contain a directive marker.
	"""
	stray = []
	for node in nodes:
		if not isinstance(node, TextNode):
			continue
		for line in node.text.splitlines():
			if MARKER in line:
				stray.append(line.strip())
	return stray


#============================================
def render_html(nodes: list) -> str:
	"""
	Render nodes to markdown with HTML markers for directive blocks.
	"""
	parts = []
	for node in nodes:
		if isinstance(node, TextNode):
			parts.append(node.text)
		elif isinstance(node, CalloutNode):
			kind = html.escape(node.kind, quote=True)
			parts.append(f'<div data-callout="{kind}">\n\n{node.body}\n\n</div>')
		elif isinstance(node, PromptNode):
			parts.append(f'<div data-prompt="true">\n\n```\n{node.body}\n```\n\n</div>')
		elif isinstance(node, StatNode):
			value = html.escape(node.value, quote=True)
			label = html.escape(node.label, quote=True)
			parts.append(f'<span data-stat-value="{value}" data-stat-label="{label}"></span>')
		else:
			raise TypeError(f"Unknown directive node: {node!r}")
	return "".join(parts)
