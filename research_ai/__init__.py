"""R&D Execution pipeline: Intake plus Phases A-F on Claude with web search.

Author: Gia Tenica*
*Gia Tenica is an anagram for Agentic AI. Gia is a fully autonomous AI researcher,
for more information see: https://giatenica.com
"""

__version__ = "0.1.0"
