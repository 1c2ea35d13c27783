"""Category policy table.

Every category-dependent rule is declared here once. The builder (coercions at build time) and the
validator (post-hoc checks) both consult this table, so the two cannot drift apart.
"""

from __future__ import annotations

from dataclasses import dataclass

from src.template.schema import Category


@dataclass(frozen=True)
class CategoryPolicy:
    """Rules applied to documents of one category."""

    # Footer
    allow_footer: bool
    synthesize_opt_out_footer: bool
    # Buttons
    collapse_buttons_to_copy_code: bool
    warn_without_opt_out_button: bool
    # Header / body
    strip_header_emoji: bool
    forbid_header_emoji: bool
    withhold_body_text_with_placeholders: bool
    # Advisory message TTL range in seconds (inclusive).
    ttl_range: tuple[int, int]


CATEGORY_POLICIES: dict[Category, CategoryPolicy] = {
    Category.marketing: CategoryPolicy(
        allow_footer=True,
        synthesize_opt_out_footer=True,
        collapse_buttons_to_copy_code=False,
        warn_without_opt_out_button=True,
        strip_header_emoji=False,
        forbid_header_emoji=False,
        withhold_body_text_with_placeholders=False,
        ttl_range=(43_200, 2_592_000),
    ),
    Category.utility: CategoryPolicy(
        allow_footer=True,
        synthesize_opt_out_footer=False,
        collapse_buttons_to_copy_code=False,
        warn_without_opt_out_button=False,
        strip_header_emoji=False,
        forbid_header_emoji=False,
        withhold_body_text_with_placeholders=False,
        ttl_range=(30, 43_200),
    ),
    Category.authentication: CategoryPolicy(
        allow_footer=False,
        synthesize_opt_out_footer=False,
        collapse_buttons_to_copy_code=True,
        warn_without_opt_out_button=False,
        strip_header_emoji=True,
        forbid_header_emoji=True,
        withhold_body_text_with_placeholders=True,
        ttl_range=(30, 900),
    ),
}


def policy_for(category: Category) -> CategoryPolicy:
    """Return the policy for a category."""

    return CATEGORY_POLICIES[Category(category)]
