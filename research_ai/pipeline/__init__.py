"""R&D Execution pipeline modules.

This package provides the step chain (Intake, bridges, Phases A-F), the run
context, the late-bound workflow handle, and the budgeted run entrypoint.

Author: Gia Tenica*
*Gia Tenica is an anagram for Agentic AI. Gia is a fully autonomous AI researcher,
for more information see: https://giatenica.com
"""
