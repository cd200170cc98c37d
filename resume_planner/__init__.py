"""
Resume Planner - budget-aware bullet selection for tailored resumes

Chooses which experience bullets make it onto a resume given the stories in an
experience bank, their relevance to a job, the job's target skills, and a space
budget (printed lines and bullet count).

Architecture:
- Targeting Context: Value scoring, combination generation, knapsack/greedy/hybrid
  selection, and resume plan assembly
- Utils: Logging setup shared across contexts
"""

__version__ = "0.1.0"
