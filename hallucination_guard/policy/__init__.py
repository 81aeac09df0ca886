"""HallucinationGuard policy — document schema, loading, and evaluation."""

from hallucination_guard.policy.defaults import DEFAULT_POLICY
from hallucination_guard.policy.evaluator import PolicyEvaluator
from hallucination_guard.policy.loader import load_policy, load_policy_from_dict
from hallucination_guard.policy.schema import PolicyDocument

__all__ = [
    "PolicyDocument",
    "PolicyEvaluator",
    "load_policy",
    "load_policy_from_dict",
    "DEFAULT_POLICY",
]
