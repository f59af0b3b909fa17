"""
Render the seven fixed blog posts from a merged insights snapshot.

Bodies are markdown with directive markup (see directive_markup). Every
post is rebuilt from scratch on each run; only the slugs are stable.
"""

from dataclasses import dataclass

from postlib import directive_markup
from postlib import insights_fields
from postlib import pipeline_text_utils
from postlib import text_cleaner
from postlib.fact_extraction import SessionFacts


# Published URLs. Never rename one of these.
POST_SLUGS = [
	"how-i-use-claude-code",
	"what-works",
	"where-things-go-wrong",
	"power-user-tips",
	"the-story",
	"whats-next",
	"the-projects",
]
PROJECT_SEPARATOR = "\n\n---\n\n"


#============================================
@dataclass
class BlogPost:
	slug: str
	title: str
	subtitle: str
	date: str
	category: str
	category_color: str
	icon: str
	reading_time: str
	content: str
	highlights: list[str] | None = None
	key_takeaway: str | None = None
	stats: list[dict] | None = None

	#============================================
	def to_dict(self) -> dict:
		"""
		Serialize with the renderer's camelCase keys, omitting unset fields.
		"""
		record = {
			"slug": self.slug,
			"title": self.title,
			"subtitle": self.subtitle,
			"date": self.date,
			"category": self.category,
			"categoryColor": self.category_color,
			"icon": self.icon,
			"readingTime": self.reading_time,
			"content": self.content,
		}
		if self.highlights is not None:
			record["highlights"] = list(self.highlights)
		if self.key_takeaway is not None:
			record["keyTakeaway"] = self.key_takeaway
		if self.stats is not None:
			record["stats"] = [dict(item) for item in self.stats]
		return record


#============================================
def stat_badge(label: str, value, color: str) -> dict:
	return {"label": label, "value": str(value), "color": color}


#============================================
class PostContext:
	"""
	Shared inputs for every post template.
	"""

	def __init__(self, insights: dict, facts: SessionFacts, today: str, rules: list | None, words_per_minute: int):
		self.insights = insights
		self.facts = facts
		self.today = today
		self.rules = rules
		self.words_per_minute = words_per_minute

	#============================================
	def clean(self, text) -> str:
		return text_cleaner.clean(str(text or ""), self.rules)

	#============================================
	def name(self, text) -> str:
		return text_cleaner.anonymize(str(text or ""), self.rules)

	#============================================
	def items(self, section: str, key: str) -> list[dict]:
		return [item for item in insights_fields.get_items(self.insights, section, key) if isinstance(item, dict)]

	#============================================
	def text(self, section: str, key: str) -> str:
		return insights_fields.get_text(self.insights, section, key)

	#============================================
	def reading_time(self, content: str) -> str:
		return pipeline_text_utils.estimate_reading_time(content, self.words_per_minute)


#============================================
def join_blocks(blocks: list[str], separator: str = "\n\n") -> str:
	return separator.join(block for block in blocks if block)


#============================================
def build_usage_post(ctx: PostContext) -> BlogPost:
	facts = ctx.facts
	project_blocks = []
	for area in insights_fields.get_project_areas(ctx.insights):
		project_blocks.append(
			f"### {ctx.name(area.get('name'))}\n"
			f"{directive_markup.stat(insights_fields.session_count(area), 'sessions')}\n\n"
			f"{ctx.clean(area.get('description'))}"
		)
	summary = directive_markup.callout(
		"insight",
		f"**The one-line summary:** {ctx.clean(ctx.text('interaction_style', 'key_pattern'))}",
	)
	content = f"""
The short version is a row of numbers: {facts.total_sessions} sessions, {facts.commits} commits, {facts.hours} hours, {facts.project_count} projects. Numbers do not say what it feels like to treat an AI as the main engineering partner for weeks on end.

This is the longer version.

## The Working Dynamic

{ctx.clean(ctx.text('interaction_style', 'narrative'))}

{summary}

## What a Normal Day Looks Like

Most sessions follow one arc. I describe the goal at a high level, Claude breaks it into steps, and we iterate. Good sessions feel like pairing with someone who types infinitely fast. Bad sessions feel like managing a new hire who keeps misreading the architecture.

What separates them is specificity. "Add a delete button to the profile page with a confirmation modal that calls the existing deleteUser endpoint" gets done. "Improve the settings page" gets eight minutes of file reading and plan writing and no code.

## The Projects

{join_blocks(project_blocks)}

## The Meta-Pattern

After {facts.total_sessions} sessions, the thing that matters most is not a technique. It is the speed of the feedback loop. The faster a mistake gets noticed and corrected, the more gets shipped. Every optimization I have found comes down to shrinking the gap between "that's wrong" and "now it's right."
""".strip()
	return BlogPost(
		slug="how-i-use-claude-code",
		title="What It's Actually Like to Use Claude Code for Everything",
		subtitle=f"{facts.total_sessions} sessions, {facts.commits} commits, {facts.hours} hours: an honest account of treating AI as an engineering partner",
		date=ctx.today,
		category="Workflow",
		category_color="cyan",
		icon="terminal",
		reading_time=ctx.reading_time(content),
		content=content,
		highlights=[
			f"{facts.total_sessions} sessions",
			f"{facts.commits} commits",
			f"{facts.file_touches} file touches",
		],
		key_takeaway="The speed of the feedback loop is everything. Shrink the time between 'that's wrong' and 'now it's right.'",
		stats=[
			stat_badge("Sessions", facts.total_sessions, "green"),
			stat_badge("Commits", facts.commits, "amber"),
			stat_badge("Hours", facts.hours, "cyan"),
		],
	)


#============================================
def build_what_works_post(ctx: PostContext) -> BlogPost:
	workflows = ctx.items("what_works", "impressive_workflows")
	workflow_blocks = [
		f"## {ctx.name(workflow.get('title'))}\n\n{ctx.clean(workflow.get('description'))}"
		for workflow in workflows
	]
	mental_model = directive_markup.callout(
		"insight",
		"**The mental model that works:** Treat Claude as a contractor, not an employee. "
		"Nobody tells a contractor which nails to use. Describe the finished product and inspect the work.",
	)
	content = f"""
{ctx.clean(ctx.text('what_works', 'intro'))}

"It works well" is not useful advice on its own. Which parts work, and which patterns are worth copying?

{join_blocks(workflow_blocks)}

## The Pattern Behind the Patterns

Each workflow above has the same shape: **clear scope, autonomous execution, a verification gate, then ship.**

The temptation with AI coding tools is to micromanage every function and every file. That is the slow path. The fast path is to describe the outcome, let Claude choose the implementation, and check the result against the real quality bar: type checks, builds, tests and a look at the screen.

{mental_model}

## What Does Not Get Said Enough

The biggest unlock was trust built up over time. Once I had watched Claude land a complex connector across a dozen files in one session, I started scoping work far more ambitiously. That compounding trust is the real multiplier.

Trust has to be calibrated, though. Claude will confidently ship subtle bugs (see [Where Things Go Wrong](/posts/where-things-go-wrong)). High trust on implementation, zero trust on correctness until verified.
""".strip()
	return BlogPost(
		slug="what-works",
		title="The Workflows That Actually Work",
		subtitle="Concrete patterns for shipping features, fixing bugs, and running code reviews with Claude Code",
		date=ctx.today,
		category="Wins",
		category_color="green",
		icon="rocket",
		reading_time=ctx.reading_time(content),
		content=content,
		highlights=[ctx.name(workflow.get("title")) for workflow in workflows],
		key_takeaway="Describe outcomes, not implementations. Let Claude work out the how, then verify the what.",
		stats=[
			stat_badge("Commits", ctx.facts.commits, "green"),
			stat_badge("Workflows", len(workflows), "cyan"),
		],
	)


#============================================
def build_friction_post(ctx: PostContext) -> BlogPost:
	facts = ctx.facts
	categories = ctx.items("friction_analysis", "categories")
	category_blocks = []
	for category in categories:
		example_lines = "\n".join(f"- {ctx.clean(example)}" for example in category.get("examples", []) or [])
		warning = directive_markup.callout("warning", f"**Real examples from my sessions:**\n{example_lines}")
		category_blocks.append(
			f"## {ctx.name(category.get('category'))}\n\n{ctx.clean(category.get('description'))}\n\n{warning}"
		)
	lesson = directive_markup.callout(
		"insight",
		"**The counterintuitive lesson:** Buggy AI code is not fixed by more careful prompting. "
		"It is fixed by faster verification loops. Do not try to prevent bugs; catch them immediately.",
	)
	content = f"""
Most posts about AI coding tools explain how great they are. This one is about where they break.

After {facts.total_sessions} sessions I have a detailed friction log. These are not hypothetical concerns. They are things that went wrong, cost time, and sometimes sank a whole session.

{join_blocks(category_blocks)}

## The Honest Numbers

{directive_markup.stat(facts.buggy_code, 'buggy code incidents')} {directive_markup.stat(facts.wrong_approach, 'wrong approaches')}

These are not edge cases. Across {facts.total_sessions} sessions and {facts.commits} commits, roughly one session in four hit real friction. The output still outweighs the cost, but pretending the friction is not there makes it harder to manage.

## Managing Friction

The single biggest improvement: **make Claude verify its own work before it declares victory.** Running the type checker after every implementation pass catches most shipped bugs. Five seconds of checking saves fifteen minutes of debugging.

{lesson}

The second biggest improvement: **interrupt early when Claude starts over-planning.** Two minutes of reading files and writing plans with no code means it is stuck. Stop it, restate the goal concretely, and ask it to start implementing.
""".strip()
	return BlogPost(
		slug="where-things-go-wrong",
		title="Where Things Go Wrong",
		subtitle=f"An honest friction log from {facts.total_sessions} sessions: buggy code, planning paralysis, and deployment gotchas",
		date=ctx.today,
		category="Lessons",
		category_color="red",
		icon="alert",
		reading_time=ctx.reading_time(content),
		content=content,
		highlights=[ctx.name(category.get("category")) for category in categories],
		key_takeaway="Buggy AI code is not fixed by more careful prompting. It is fixed by faster verification loops.",
		stats=[
			stat_badge("Buggy Code", facts.buggy_code, "red"),
			stat_badge("Wrong Approach", facts.wrong_approach, "amber"),
			stat_badge("Sessions", facts.total_sessions, "green"),
		],
	)


#============================================
def build_tips_post(ctx: PostContext) -> BlogPost:
	facts = ctx.facts
	pattern_blocks = [
		f"### {ctx.name(pattern.get('title'))}\n\n{ctx.clean(pattern.get('detail'))}\n\n"
		f"{directive_markup.prompt_block(ctx.name(pattern.get('copyable_prompt')))}"
		for pattern in ctx.items("suggestions", "usage_patterns")
	]
	features = ctx.items("suggestions", "features_to_try")
	feature_blocks = [
		f"### {ctx.name(feature.get('feature'))}\n\n*{ctx.clean(feature.get('one_liner'))}*\n\n"
		f"{ctx.clean(feature.get('why_for_you'))}\n\n```\n{ctx.name(feature.get('example_code'))}\n```"
		for feature in features
	]
	addition_blocks = [
		directive_markup.callout(
			"tip",
			f"**Add this rule:** {ctx.name(addition.get('addition'))}\n\n**Why it matters:** {ctx.clean(addition.get('why'))}",
		)
		for addition in ctx.items("suggestions", "claude_md_additions")
	]
	content = f"""
This is the post I wanted before my first session. No theory and no hype, only the specific things that make Claude Code far more effective.

## The Prompts That Work

{join_blocks(pattern_blocks)}

## Features Worth Trying

{join_blocks(feature_blocks)}

## CLAUDE.md: The Most Underrated Feature

`CLAUDE.md` is loaded at the start of every session, which makes it the highest-leverage thing to configure. These are the rules I would add after {facts.total_sessions} sessions of friction data:

{join_blocks(addition_blocks)}

## The One-Minute Setup

If only one thing from this post sticks, make it this: a pre-commit hook that runs the type checker. Most bugs Claude ships are type errors that get caught instantly.

```json
// .claude/settings.json
{{
  "hooks": {{
    "preCommit": {{
      "command": "npx tsc --noEmit && npm run build"
    }}
  }}
}}
```

That one change would have prevented most of my {facts.buggy_code} buggy code incidents.
""".strip()
	highlights = [ctx.name(feature.get("feature")) for feature in features]
	highlights.extend(["CLAUDE.md rules", "Copyable prompts"])
	return BlogPost(
		slug="power-user-tips",
		title="Claude Code Power User Guide",
		subtitle=f"Battle-tested prompts, CLAUDE.md rules, and workflow tricks from {facts.total_sessions} sessions",
		date=ctx.today,
		category="Tips",
		category_color="green",
		icon="zap",
		reading_time=ctx.reading_time(content),
		content=content,
		highlights=highlights,
		key_takeaway="Add a CLAUDE.md rule to start coding immediately instead of over-planning, and a pre-commit hook that runs tsc. Those two changes prevent most friction.",
	)


#============================================
def build_story_post(ctx: PostContext) -> BlogPost:
	facts = ctx.facts
	headline = ctx.clean(ctx.text("fun_ending", "headline"))
	meta_insight = directive_markup.callout(
		"insight",
		"**The meta-insight:** The way to get better at Claude Code is to use it more, write down what happens, "
		"and share it. That is what this site is for.",
	)
	content = f"""
{directive_markup.callout('story', headline)}

{ctx.clean(ctx.text('fun_ending', 'detail'))}

## Why This Is Revealing

It is more than a funny anecdote. It shows the central tension of AI coding at scale: **the capability that makes these tools so productive is the same one that makes them so frustrating.**

Claude can build a full payment integration across server and client in one session. It can also spend eight minutes rereading files and drafting a plan nobody asked for. Same model, same session, sometimes minutes apart.

## Patterns After {facts.total_sessions} Sessions

Across {facts.project_count} projects and {facts.hours}+ hours, the patterns become hard to miss:

- **Productivity follows a power law.** A fifth of the sessions produce most of the shipped code. The worst sessions produce negative value: bugs to fix later.

- **Context is everything.** Claude does best with a clear goal, specific file paths, known constraints and an instruction to just do it. It does worst with vague requests and open-ended exploration.

- **Interrupting is a learned skill.** I used to wait while Claude explored. Now I cut in after two minutes without code. That one habit improved results more than any prompting trick.

## Lessons From {facts.hours}+ Hours

- **Trust but verify**: let Claude run, then validate against the build pipeline
- **Interrupt early**: when planning runs long, cut it off and redirect
- **Stack tasks on purpose**: implement, review, fix, deploy chains work; five unrelated tasks do not
- **Front-load constraints**: say what NOT to do at the start

{meta_insight}
""".strip()
	return BlogPost(
		slug="the-story",
		title=f"The Best Story From {facts.hours}+ Hours of AI Coding",
		subtitle=headline,
		date=ctx.today,
		category="Story",
		category_color="cyan",
		icon="moon",
		reading_time=ctx.reading_time(content),
		content=content,
		highlights=[
			f"{facts.total_sessions} sessions analyzed",
			f"{facts.hours}+ hours",
			"Real patterns",
		],
		key_takeaway="Interrupting is a learned skill. Do not wait patiently; step in within two minutes if no code is being written.",
	)


#============================================
def build_horizon_post(ctx: PostContext) -> BlogPost:
	opportunities = ctx.items("on_the_horizon", "opportunities")
	opportunity_blocks = [
		f"## {ctx.name(opportunity.get('title'))}\n\n{ctx.clean(opportunity.get('whats_possible'))}\n\n"
		f"### How to Start Experimenting\n\n{ctx.clean(opportunity.get('how_to_try'))}\n\n"
		f"{directive_markup.prompt_block(ctx.name(opportunity.get('copyable_prompt')))}"
		for opportunity in opportunities
	]
	trajectory = directive_markup.callout(
		"insight",
		'**The trajectory:** From "AI writes code I review" to "AI runs a development pipeline I occasionally steer." '
		"That transition is closer than most people expect.",
	)
	content = f"""
{ctx.clean(ctx.text('on_the_horizon', 'intro'))}

A year ago the workflows I use today would have sounded implausible. This is what I expect to become possible next, based on patterns already working at small scale rather than on speculation.

{join_blocks(opportunity_blocks)}

## The Bigger Picture

Most people use Claude Code for one task per session: fix this bug, add this feature, write this test. That is like using a spreadsheet as a calculator. Correct, and badly underused.

The next step is **compound workflows**: chains of autonomous agents covering planning, implementation, testing, deployment and monitoring. Pieces of this already work.

{trajectory}

The limit is not model capability but context management. The models can do the work already. Feeding them enough context to do it reliably without a human at every step is what turns an assistant into a team.
""".strip()
	return BlogPost(
		slug="whats-next",
		title="Where AI Coding Is Actually Heading",
		subtitle="Parallel agents, self-healing deploys, and autonomous development pipelines, based on patterns already working",
		date=ctx.today,
		category="Future",
		category_color="cyan",
		icon="telescope",
		reading_time=ctx.reading_time(content),
		content=content,
		highlights=[ctx.name(opportunity.get("title")) for opportunity in opportunities],
		key_takeaway="The limit is context management, not model capability. Solving it turns AI assistants into AI development teams.",
	)


#============================================
def project_callout(sessions: int) -> str:
	"""
	Pick the closing callout for one project by session volume.
	"""
	if sessions > 30:
		return directive_markup.callout(
			"insight",
			f"With {sessions} sessions, this was heavy enough to show Claude's real strengths and weaknesses here. "
			"Much of the [Power User Guide](/posts/power-user-tips) came out of it.",
		)
	if sessions > 15:
		return directive_markup.callout(
			"tip",
			f"At {sessions} sessions, the dominant pattern was rapid iteration: fixing issues as they surfaced instead of preventing them upfront.",
		)
	return directive_markup.callout(
		"tip",
		f"Even with only {sessions} sessions, Claude handled the full scope from initial setup to production deploy.",
	)


#============================================
def build_projects_post(ctx: PostContext) -> BlogPost:
	facts = ctx.facts
	areas = insights_fields.get_project_areas(ctx.insights)
	area_blocks = []
	highlights = []
	for area in areas:
		sessions = insights_fields.session_count(area)
		name = ctx.name(area.get("name"))
		area_blocks.append(
			f"## {name}\n\n{directive_markup.stat(sessions, 'sessions')}\n\n"
			f"{ctx.clean(area.get('description'))}\n\n{project_callout(sessions)}"
		)
		short_name = name.split(" ")[0] if name else ""
		highlights.append(f"{short_name} ({sessions})")
	content = f"""
Over {facts.hours}+ hours I used Claude Code across {facts.project_count} project areas. Not tutorials: production systems with real users, integrations and deploy pipelines.

Here is what Claude handled well in each, where it struggled, and what surprised me.

{join_blocks(area_blocks, separator=PROJECT_SEPARATOR)}

## Cross-Project Patterns

Working across all {facts.project_count} areas made a few things clear:

- **TypeScript is the sweet spot.** With {facts.file_touches} file touches over the period, typed React projects had by far the best success rate. The type system catches mistakes early.

- **Infrastructure needs more hand-holding.** Terraform, migrations and deploy configs need explicit instructions. Claude's infrastructure assumptions are often wrong.

- **Integrations are surprisingly strong.** Payments, calendar APIs, OAuth flows and MCP servers went well, because the APIs are documented and the patterns are clear.
""".strip()
	return BlogPost(
		slug="the-projects",
		title=f"{facts.project_count} Projects, {facts.total_sessions} Sessions: What I Built",
		subtitle="From SaaS platforms to infrastructure to marketing sites: what Claude handles well and where it struggles",
		date=ctx.today,
		category="Projects",
		category_color="amber",
		icon="folder",
		reading_time=ctx.reading_time(content),
		content=content,
		highlights=highlights,
		key_takeaway="TypeScript is the sweet spot because the type system catches mistakes early. Infrastructure work needs more hand-holding.",
		stats=[
			stat_badge("Projects", facts.project_count, "amber"),
			stat_badge("Sessions", facts.total_sessions, "green"),
			stat_badge("File Touches", facts.file_touches, "cyan"),
		],
	)


POST_BUILDERS = [
	build_usage_post,
	build_what_works_post,
	build_friction_post,
	build_tips_post,
	build_story_post,
	build_horizon_post,
	build_projects_post,
]


#============================================
def generate_posts(
	insights: dict,
	facts: SessionFacts,
	today: str,
	rules: list | None = None,
	words_per_minute: int = pipeline_text_utils.DEFAULT_WORDS_PER_MINUTE,
) -> list[BlogPost]:
	"""
	Build all seven posts, in POST_SLUGS order.
	"""
	ctx = PostContext(insights, facts, today, rules, words_per_minute)
	posts = [builder(ctx) for builder in POST_BUILDERS]
	slugs = [post.slug for post in posts]
	if slugs != POST_SLUGS:
		raise RuntimeError(f"Post builders produced unexpected slugs: {slugs}")
	return posts


#============================================
def post_index_records(posts: list[BlogPost]) -> list[dict]:
	"""
	Serialize posts without their bodies, keeping order.
	"""
	records = []
	for post in posts:
		record = post.to_dict()
		record.pop("content", None)
		records.append(record)
	return records
