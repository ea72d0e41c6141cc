"""
LLM layer for plan pitches.

Responsibilities:
- Call Groq to write a short, friendly pitch for each recommended plan.
- Never change which plans are returned or their order.
- Fail soft: any API problem yields no pitches instead of an error.
"""
