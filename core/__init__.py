# core/__init__.py
"""
Core conversation logic.

Import order (least dependent first):
1. prompt_builder, response_sanitizer (pure functions)
2. orchestrator (per-turn state machine)
3. workspace (application wiring)
"""
