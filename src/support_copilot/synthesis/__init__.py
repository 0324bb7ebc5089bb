"""Solution synthesis for support_copilot."""
from support_copilot.synthesis.fallback import fallback_solutions
from support_copilot.synthesis.parsing import parse_solutions, strip_code_fences
from support_copilot.synthesis.synthesizer import SolutionSynthesizer

__all__ = ["SolutionSynthesizer", "fallback_solutions", "parse_solutions", "strip_code_fences"]
