from .evaluation import evaluate, print_evaluation_results

__all__ = ["evaluate", "print_evaluation_results"]
