"""
Branch Classifier for conditionals and ``else if`` chains.

A conditional is one of:

- NON_FULL_NON_DANGLING: ``if (a) {...}`` without an else
- FULL_NON_DANGLING: ``if (a) {...} else {...}``
- DANGLING: ``if (a) {...} else if (b) ...``, the alternate is itself a conditional

The plan derived from the classification and the policy tells the coverage
checker which positions of one chain link require a comment.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from commentguard.analyzers.source_index import SourceIndex
from commentguard.models.policy import FULL_ONLY, ChainHeadMode, Policy
from commentguard.models.syntax import NodeKind, SyntaxNode


class IfClassification(str, Enum):
    """Structural category of a conditional."""

    NON_FULL_NON_DANGLING = "non-full-non-dangling"
    FULL_NON_DANGLING = "full-non-dangling"
    DANGLING = "dangling"


class ConditionalPlan(BaseModel):
    """Coverage requirements of a single conditional."""

    model_config = ConfigDict(frozen=True)

    classification: IfClassification
    is_chain_head: bool
    is_inner_branch: bool
    needs_preceding_comment: bool
    check_then: bool
    check_else: bool


def section_policy_applies(policy: Policy, classification: IfClassification) -> bool:
    """Whether branch (section) comments are required for this classification."""
    flag = policy.require_section_comments
    if flag == FULL_ONLY:
        return classification != IfClassification.NON_FULL_NON_DANGLING
    return bool(flag)


class BranchClassifier:
    """Classifies conditionals of one file."""

    def __init__(self, index: SourceIndex, policy: Policy):
        self.index = index
        self.policy = policy

    def classify_conditional(self, node: SyntaxNode) -> IfClassification:
        alternate = self.index.node(node.alternate_id)
        if alternate is None:
            return IfClassification.NON_FULL_NON_DANGLING
        if alternate.kind == NodeKind.CONDITIONAL:
            return IfClassification.DANGLING
        return IfClassification.FULL_NON_DANGLING

    def is_inner_chained_branch(self, node: SyntaxNode) -> bool:
        """True if ``node`` is the ``else if`` alternate of its parent conditional."""
        parent = self.index.parent(node)
        return (
            parent is not None
            and parent.kind == NodeKind.CONDITIONAL
            and parent.alternate_id == node.node_id
        )

    def chain(self, head: SyntaxNode) -> List[SyntaxNode]:
        """The head followed by every ``else if`` link below it."""
        links = [head]
        current: Optional[SyntaxNode] = head
        while current is not None:
            alternate = self.index.node(current.alternate_id)
            if alternate is None or alternate.kind != NodeKind.CONDITIONAL:
                break
            links.append(alternate)
            current = alternate
        return links

    def plan(self, node: SyntaxNode) -> ConditionalPlan:
        classification = self.classify_conditional(node)
        is_inner = self.is_inner_chained_branch(node)

        if is_inner:
            needs_preceding = not self.policy.ignore_else_if_chained_branch
        else:
            treated_as_dangling = (
                classification == IfClassification.DANGLING
                and self.policy.treat_chain_head_as == ChainHeadMode.DANGLING
            )
            needs_preceding = not treated_as_dangling

        sections = section_policy_applies(self.policy, classification)
        # An exempt link still explains its then branch
        check_then = sections or not needs_preceding
        check_else = sections and classification == IfClassification.FULL_NON_DANGLING

        return ConditionalPlan(
            classification=classification,
            is_chain_head=not is_inner,
            is_inner_branch=is_inner,
            needs_preceding_comment=needs_preceding,
            check_then=check_then,
            check_else=check_else,
        )
