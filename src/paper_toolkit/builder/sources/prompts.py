"""
Prompt templates for the question sources.

Both prompts pin down the math-delimiter convention the rest of the
pipeline relies on: $...$ for inline math, $$...$$ for display math.
Templates are filled with str.format, so literal braces are doubled.
"""

SYSTEM_PROMPT = (
    "You are an expert teacher who prepares exam question papers for school "
    "education boards. Output only what is asked, as a single JSON object."
)

# ─── Shared math formatting rules ──────────────────────────────────────────────

MATH_RULES = """IMPORTANT: For any mathematical formulas, equations, or symbols you MUST use LaTeX syntax enclosed in delimiters.
Use single dollar signs ($...$) for inline math and double dollar signs ($$...$$) for display math (equations on their own line).
If the source material does not use LaTeX, convert it.

Examples:
- Inline: The area of a circle is $A = \\pi r^2$. A fraction is written $\\frac{{a}}{{b}}$.
- Display math:
$$ \\int_0^\\infty e^{{-x^2}} dx = \\frac{{\\sqrt{{\\pi}}}}{{2}} $$
- Matrices and tables: do NOT use \\begin{{...}} environments (bmatrix, pmatrix, array, tabular); they cannot be typeset.
  Describe them in words with inline math for the entries, e.g. "the matrix with rows $(1, 2)$ and $(3, 4)$".

Make fractions clearly distinguishable ($\\frac{{}}{{}}$ or $\\dfrac{{}}{{}}$) and use standard, unambiguous symbols.
Inside JSON strings, escape every backslash (write \\\\frac, not \\frac)."""

OUTPUT_RULES = """OUTPUT FORMAT - respond with ONLY a valid JSON object, no markdown, no explanation:
{{"questions": ["<question 1>", "<question 2>", ...]}}"""


# ─── Probable questions (AI generation) ────────────────────────────────────────

PROBABLE_QUESTIONS_PROMPT = """You are an expert teacher specializing in creating question papers for various education boards and classes.
Based on the given syllabus, board, class level, and subject, generate a list of probable exam questions.
Do not write fillers like "**Question:**" or numbering; each list entry is one complete question.

""" + MATH_RULES + """

Syllabus: {syllabus}
Board: {board}
Class Level: {class_level}
Subject: {subject}

""" + OUTPUT_RULES


# ─── Past year questions (web search) ──────────────────────────────────────────

PAST_YEAR_QUESTIONS_PROMPT = """You are an expert educator helping teachers create question papers.
Find past year questions (PYQs) related to the given topic that were set by the given education board.
Return only questions relevant to the topic and the board. Do not mention the source of a question.

""" + MATH_RULES + """

Topic: {topic}
Board: {board}

""" + OUTPUT_RULES
