"""
Core business logic modules for SmartHire.

Submodules:
- workflow: Application stage state machine and workflow engine
- matching: Skill match scoring and job recommendations
- exceptions: Error taxonomy shared by both
"""
