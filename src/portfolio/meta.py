"""SEO metadata derived from the manifest's categories and photo counts."""

from portfolio.schemas.manifest import Manifest
from portfolio.schemas.meta import SiteMeta, UiPolicy
from portfolio.settings import SiteSettings


def _follow_suffix(site: SiteSettings) -> str:
    if not site.social_handle:
        return ""
    return f" Follow @{site.social_handle.lstrip('@')} on Instagram for more."


def build_meta(manifest: Manifest, site: SiteSettings) -> SiteMeta:
    """Render title, description and keywords for the current photo library.

    An empty library yields the static defaults so crawlers still get a
    meaningful page description.
    """
    categories = manifest.categories
    category_counts = manifest.meta.category_counts if manifest.meta else []
    total_photos = manifest.total_photos

    if not categories:
        return SiteMeta(
            title=f"Professional Photography Portfolio | {site.name}",
            description=f"Professional photography portfolio featuring {site.fallback_subjects}.{_follow_suffix(site)}",
            keywords=f"photography, photography portfolio, landscape photography, portrait photography, street photography, {site.name}, professional photographer",
            categories=[],
            total_photos=0,
            category_counts=[],
            generated=manifest.generated,
        )

    category_list = ", ".join(categories)
    category_keywords = ", ".join(f"{category} photography" for category in categories)
    return SiteMeta(
        title=f"Professional Photography Portfolio | {category_list} | {site.name}",
        description=f"Professional photography portfolio featuring {category_list}. {total_photos}+ high-quality photos.{_follow_suffix(site)}",
        keywords=f"photography, photography portfolio, {category_keywords}, {site.name}, professional photographer",
        categories=categories,
        total_photos=total_photos,
        category_counts=category_counts,
        generated=manifest.generated,
    )


def build_ui_policy(site: SiteSettings) -> UiPolicy:
    return UiPolicy(
        disable_context_menu=site.disable_context_menu,
        disable_text_selection=site.disable_text_selection,
        block_devtools_shortcuts=site.block_devtools_shortcuts,
    )
