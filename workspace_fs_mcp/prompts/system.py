"""Defines the composable prompts for the MCP server."""

BASE_PROMPT = """You are an AI coding assistant embedded in a browser IDE.
You help developers write, debug, and improve their code.

You can help with:
1. Explaining code
2. Finding and fixing errors
3. Suggesting improvements
4. Generating code snippets
5. Answering programming questions

Please be concise, helpful, and provide code examples when appropriate.
"""

FILE_OPERATIONS_INSTRUCTIONS = """
# File Operations

File operations are carried out by the `assistant` tool, not by you. Requests it understands look like:
- "Create a new file called example.js with content: ..."
- "Update this file with the content: ..." (applies to the file that is currently open)
- "Delete the file called example.js"
- "Create a folder called components"

Operations run immediately, without confirmation and without undo. Deleting is permanent.
If the tool returns an empty response, the message was not a file operation and you should answer it yourself.
"""

CURRENT_FILE_TEMPLATE = """
The user is currently working on the file: {current_file}
"""

CODE_TEMPLATE = """
Here is the code the user is working on:
```
{code}
```
"""


def get_prompts() -> dict[str, str]:
    """
    Returns a dictionary of available prompt components.
    """
    return {
        "base": BASE_PROMPT,
        "file-operations-instructions": FILE_OPERATIONS_INSTRUCTIONS,
    }


def build_assistant_prompt(current_file: str = "", code: str = "") -> str:
    """Compose the assistant system prompt around the editor's current file and code."""
    prompt = BASE_PROMPT
    if current_file:
        prompt += CURRENT_FILE_TEMPLATE.format(current_file=current_file)
    if code:
        prompt += CODE_TEMPLATE.format(code=code)
    return prompt + FILE_OPERATIONS_INSTRUCTIONS
