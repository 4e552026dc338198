# AI Core module

"""
AI Core Module - decides what a documentation change means for onboarding.

Key responsibilities:
- Documentation file taxonomy
- Change analysis against a plan's onboarding steps (severity, affected steps,
  auto-update eligibility, suggested instruction updates)
"""
