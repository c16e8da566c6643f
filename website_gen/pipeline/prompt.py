"""
Instruction template sent to the model for every generation.

The wording and the three section markers are what the model is expected to
echo back, so the template text must stay as it is.
"""

DESCRIPTION_PLACEHOLDER = "[USER_DESCRIPTION]"

HTML_MARKER = "---HTML---"
CSS_MARKER = "---CSS---"
JS_MARKER = "---JS---"


BASE_PROMPT = """
You are an experienced frontend developer and UI engineer.

Your task is to generate a complete, functional website strictly using
HTML, CSS, and JavaScript only. The output must be clean, readable,
well-structured, and beginner-friendly. The generated website must work
entirely in the browser without any backend, frameworks, libraries, or
external dependencies.

The JavaScript must be fully self-contained and should not assume the
existence of any global variables or external files. The HTML must not
include <script src=""> or <link rel="stylesheet"> tags. Styling must be
written only in CSS, and behavior must be written only in JavaScript.

Do not include explanations, markdown, headings, or labels such as
"html", "css", or "javascript". Do not wrap code inside backticks.
Return only pure code inside the exact markers provided below.

The website should be practical, interactive, and realistic, following
standard web development practices. Use meaningful IDs, classes, and
clear logic.

Return output in EXACTLY this format and nothing else:

---HTML---
(code)

---CSS---
(code)

---JS---
(code)

User request:
[USER_DESCRIPTION]
"""


def build_prompt(description: str, template: str = BASE_PROMPT) -> str:
    """
    Fill the instruction template with a user description.

    Args:
        description: Website description, already trimmed.
        template: Template containing DESCRIPTION_PLACEHOLDER.

    Returns:
        Prompt text for a single user message.
    """
    return template.replace(DESCRIPTION_PLACEHOLDER, description, 1)
