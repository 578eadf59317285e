"""Argument skeleton built from the top-ranked cases."""

from typing import Optional, Sequence

from ..models.schemas import (
    ArgumentStructure,
    PrimaryArgument,
    RankedCase,
    RecommendedUse,
    SupportingArgument,
)

SUPPORTIVE_ROLE = "Reinforces the principle that..."


class ArgumentStructureBuilder:
    """Opening, primary argument, supporting arguments and conclusion."""

    def __init__(self, pool_size: int = 3):
        self.pool_size = pool_size

    def build(self, ranked: Sequence[RankedCase]) -> Optional[ArgumentStructure]:
        """Skeleton over the top ``pool_size`` cases, or None when there are none."""
        top = list(ranked[: self.pool_size])
        if not top:
            return None

        primary, supporting = top[0], top[1:]

        return ArgumentStructure(
            opening_statement=(
                f"Based on established precedent, particularly {primary.case.title}, "
                "the legal standard requires..."
            ),
            primary_argument=PrimaryArgument(
                case=primary.case,
                application=primary.analysis.practical_application,
                key_quote=primary.case.holding,
            ),
            supporting_arguments=[
                SupportingArgument(
                    case=item.case,
                    application=item.analysis.practical_application,
                    supportive_role=SUPPORTIVE_ROLE,
                )
                for item in supporting
            ],
            conclusion=self.conclusion(top),
        )

    @staticmethod
    def conclusion(cases: Sequence[RankedCase]) -> str:
        primary_authorities = sum(
            1 for item in cases
            if item.analysis.recommended_use == RecommendedUse.PRIMARY_AUTHORITY
        )

        if primary_authorities > 1:
            return (
                "Multiple binding precedents establish a clear legal framework "
                "supporting this position."
            )
        if primary_authorities == 1:
            return (
                "Binding precedent clearly supports this legal position with additional "
                "authority providing reinforcement."
            )
        return (
            "While direct precedent may be limited, the weight of authority supports "
            "this interpretation."
        )
