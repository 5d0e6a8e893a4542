"""
Sustainability scoring.

Two independent formula sets live here. The basic set scores heuristic data
(direct page fetch or its simulation); the PageSpeed set scores lab data and
a full emissions estimate. They weigh the same signals differently and are
never mixed within one report.

Every score starts at 100, takes penalties and bonuses, and is rounded and
clamped to 0-100.
"""
from dataclasses import dataclass
from typing import Dict, Iterable, List

from websustain.features.analysis.schemas.analysis import AnalysisMethod, AnalysisResult
from websustain.features.analysis.schemas.emissions import EmissionsEstimate
from websustain.features.analysis.utils.numbers import clamp_score, round_half_up, safe_ratio

BASIC_RECOMMENDATION_CAP = 10
PAGESPEED_RECOMMENDATION_CAP = 12

DISCLAIMERS: Dict[AnalysisMethod, str] = {
    AnalysisMethod.PAGESPEED: (
        "Analysis powered by Google PageSpeed Insights lab data with CO2 estimates "
        "from the Sustainable Web Design model."
    ),
    AnalysisMethod.BASIC: (
        "Note: This analysis is based on a direct fetch of the page HTML. "
        "Configure a PageSpeed Insights API key for lab-measured performance data."
    ),
    AnalysisMethod.SIMULATED: (
        "Note: This analysis uses simulated data due to website access restrictions. "
        "For accurate results, ensure the website allows external analysis."
    ),
}

RATING_BONUS = {
    "A+": 10,
    "A": 8,
    "B": 5,
    "C": 2,
    "D": 0,
    "E": -5,
    "F": -10,
}

GENERAL_BASIC_RECOMMENDATIONS = [
    "Implement caching strategies to reduce server load and improve user experience",
    "Use modern image formats (WebP, AVIF) and responsive images for better performance",
    "Consider implementing a service worker for offline functionality and reduced server requests",
    "Regularly audit and remove unused code, images, and third-party scripts",
]

GENERAL_PAGESPEED_RECOMMENDATIONS = [
    "Implement efficient caching strategies to reduce repeat data transfer",
    "Use modern image formats (WebP, AVIF) and responsive images",
    "Consider implementing a service worker for offline functionality",
]


@dataclass(frozen=True)
class SubScores:
    energy_efficiency: int
    carbon_footprint: int
    resource_optimization: int
    accessibility: int


def finalize_recommendations(method: AnalysisMethod, recommendations: Iterable[str], cap: int) -> List[str]:
    """Disclaimer first, then first-seen order without duplicates, truncated to cap."""
    ordered = dict.fromkeys([DISCLAIMERS[method], *recommendations])
    return list(ordered)[:cap]


# ============================================================================
# Basic path
# ============================================================================

def basic_energy_efficiency(data: AnalysisResult) -> int:
    score = 100.0

    if data.load_time > 3000:
        score -= min(30, (data.load_time - 3000) / 100)
    elif data.load_time > 2000:
        score -= min(20, (data.load_time - 2000) / 100)

    if data.page_size > 2000:
        score -= min(25, (data.page_size - 2000) / 100)
    elif data.page_size > 1000:
        score -= min(15, (data.page_size - 1000) / 100)

    if data.video_count > 2:
        score -= (data.video_count - 2) * 5

    if data.compression_enabled:
        score += 5
    if data.cdn_enabled:
        score += 5

    return clamp_score(score)


def basic_carbon_footprint(data: AnalysisResult) -> int:
    score = 100.0
    footprint = data.carbon_footprint or 0.0

    if footprint > 2:
        score -= min(40, (footprint - 2) * 20)
    elif footprint > 1:
        score -= min(20, (footprint - 1) * 20)

    if data.green_hosting:
        score += 10
    if data.compression_enabled:
        score += 5
    if data.cdn_enabled:
        score += 5

    return clamp_score(score)


def basic_resource_optimization(data: AnalysisResult) -> int:
    score = 100.0

    if data.script_count > 10:
        score -= (data.script_count - 10) * 3
    if data.css_count > 5:
        score -= (data.css_count - 5) * 4
    if data.font_count > 3:
        score -= (data.font_count - 3) * 5

    if data.page_size > 1500:
        score -= min(20, (data.page_size - 1500) / 100)

    if data.compression_enabled:
        score += 5
    if data.cdn_enabled:
        score += 5

    return clamp_score(score)


def basic_sub_scores(data: AnalysisResult) -> SubScores:
    return SubScores(
        energy_efficiency=basic_energy_efficiency(data),
        carbon_footprint=basic_carbon_footprint(data),
        resource_optimization=basic_resource_optimization(data),
        accessibility=clamp_score(data.accessibility_score),
    )


def basic_recommendations(data: AnalysisResult, scores: SubScores) -> List[str]:
    recommendations: List[str] = []

    if scores.energy_efficiency < 80:
        if data.load_time > 2000:
            recommendations.append("Optimize page load time by reducing server response time and implementing lazy loading")
        if data.page_size > 1000:
            recommendations.append("Compress and optimize images, minify CSS/JS files to reduce page size")
        if data.video_count > 1:
            recommendations.append("Consider replacing videos with optimized images or implementing video lazy loading")
        if not data.compression_enabled:
            recommendations.append("Enable gzip or Brotli compression on your server to reduce file sizes")
        if not data.cdn_enabled:
            recommendations.append("Implement a Content Delivery Network (CDN) to improve loading speeds globally")

    if scores.carbon_footprint < 80:
        if not data.green_hosting:
            recommendations.append("Switch to a green hosting provider that runs on renewable energy")
        if data.page_size > 1000:
            recommendations.append("Reduce page size by optimizing media files and removing unused code")
        if data.video_count > 0:
            recommendations.append("Optimize video content and consider using lower resolution versions for mobile")

    if scores.resource_optimization < 80:
        if data.script_count > 10:
            recommendations.append("Consolidate JavaScript files and remove unused scripts to reduce HTTP requests")
        if data.css_count > 5:
            recommendations.append("Combine CSS files and remove unused styles to improve performance")
        if data.font_count > 3:
            recommendations.append("Limit font families and use system fonts when possible to reduce loading time")
        if data.image_count > 15:
            recommendations.append("Implement lazy loading for images and use modern formats like WebP")

    if scores.accessibility < 80:
        recommendations.append("Improve accessibility by adding proper alt text, semantic HTML, and keyboard navigation")
        recommendations.append("Ensure sufficient color contrast and readable font sizes for better user experience")
        recommendations.append("Add ARIA labels and roles where appropriate for screen readers")

    recommendations.extend(GENERAL_BASIC_RECOMMENDATIONS)
    return recommendations


# ============================================================================
# PageSpeed path
# ============================================================================

def pagespeed_energy_efficiency(data: AnalysisResult) -> int:
    score = 100.0
    lcp = data.largest_contentful_paint or 0
    tbt = data.total_blocking_time or 0

    if lcp > 4000:
        score -= 25
    elif lcp > 2500:
        score -= 15
    elif lcp > 1500:
        score -= 5

    if tbt > 300:
        score -= 20
    elif tbt > 150:
        score -= 10

    size_mb = data.page_size_mb
    if size_mb > 3:
        score -= 20
    elif size_mb > 2:
        score -= 10
    elif size_mb > 1:
        score -= 5

    if data.performance_score > 90:
        score += 5

    return clamp_score(score)


def pagespeed_carbon_footprint(co2: EmissionsEstimate) -> int:
    score = 100.0
    per_visit = co2.co2_per_visit

    if per_visit > 1.0:
        score -= min(40, (per_visit - 1.0) * 30)
    elif per_visit > 0.5:
        score -= min(20, (per_visit - 0.5) * 20)

    if co2.green_hosting_impact.savings_percentage > 0:
        score += 10

    optimization_percent = safe_ratio(co2.optimization_potential.total_potential_savings, co2.total_co2) * 100
    if optimization_percent > 30:
        score -= 15
    elif optimization_percent > 15:
        score -= 8

    score += RATING_BONUS.get(co2.co2_rating, 0)

    return clamp_score(score)


def pagespeed_resource_optimization(data: AnalysisResult) -> int:
    score = 100.0
    total_size = data.total_resource_size

    unused_css_percent = safe_ratio(data.unused_css_bytes or 0, total_size) * 100
    unused_js_percent = safe_ratio(data.unused_js_bytes or 0, total_size) * 100

    if unused_css_percent > 20:
        score -= 15
    elif unused_css_percent > 10:
        score -= 8

    if unused_js_percent > 25:
        score -= 20
    elif unused_js_percent > 15:
        score -= 10

    unoptimized_image_percent = safe_ratio(data.unoptimized_image_bytes or 0, data.image_resource_size or 0) * 100
    if unoptimized_image_percent > 30:
        score -= 15
    elif unoptimized_image_percent > 15:
        score -= 8

    render_blocking = data.render_blocking_resources or 0
    if render_blocking > 10:
        score -= 15
    elif render_blocking > 5:
        score -= 8

    dom_size = data.dom_size or 0
    if dom_size > 1500:
        score -= 10
    elif dom_size > 1000:
        score -= 5

    if (data.best_practices_score or 0) > 90:
        score += 5

    return clamp_score(score)


def pagespeed_sub_scores(data: AnalysisResult, co2: EmissionsEstimate) -> SubScores:
    return SubScores(
        energy_efficiency=pagespeed_energy_efficiency(data),
        carbon_footprint=pagespeed_carbon_footprint(co2),
        resource_optimization=pagespeed_resource_optimization(data),
        accessibility=clamp_score(data.accessibility_score),
    )


def pagespeed_recommendations(data: AnalysisResult, scores: SubScores, co2: EmissionsEstimate) -> List[str]:
    recommendations: List[str] = []
    hosting = co2.green_hosting_impact
    potential = co2.optimization_potential

    if scores.carbon_footprint < 70:
        if hosting.savings_percentage > 20:
            recommendations.append(
                f"Switch to green hosting to reduce CO2 emissions by {hosting.savings_percentage:.1f}% "
                f"({hosting.potential_savings:.3f}g CO2 per visit)"
            )
        if co2.co2_per_visit > 1.0:
            recommendations.append(
                f"High carbon footprint detected ({co2.co2_per_visit:.3f}g CO2 per visit). "
                "Consider reducing total page size and optimizing resources."
            )

    if scores.energy_efficiency < 70:
        lcp = data.largest_contentful_paint or 0
        tbt = data.total_blocking_time or 0
        if lcp > 2500:
            recommendations.append(
                f"Improve Largest Contentful Paint (currently {lcp / 1000:.1f}s) "
                "by optimizing images and critical resources"
            )
        if tbt > 200:
            recommendations.append(
                f"Reduce Total Blocking Time (currently {round_half_up(tbt)}ms) by optimizing JavaScript execution"
            )
        if data.page_size_mb > 2:
            recommendations.append(
                f"Large total resource size ({data.page_size_mb:.1f}MB). "
                "Consider implementing lazy loading and resource optimization"
            )

    if scores.resource_optimization < 70:
        unused_css = data.unused_css_bytes or 0
        unused_js = data.unused_js_bytes or 0
        unoptimized_images = data.unoptimized_image_bytes or 0
        render_blocking = data.render_blocking_resources or 0

        if unused_css > 50000:
            recommendations.append(
                f"Remove unused CSS ({unused_css / 1024:.0f}KB) to save "
                f"{potential.unused_css_savings:.3f}g CO2 per visit"
            )
        if unused_js > 100000:
            recommendations.append(
                f"Remove unused JavaScript ({unused_js / 1024:.0f}KB) to save "
                f"{potential.unused_js_savings:.3f}g CO2 per visit"
            )
        if unoptimized_images > 200000:
            recommendations.append(
                f"Optimize images ({unoptimized_images / 1024:.0f}KB potential savings) to save "
                f"{potential.image_optimization_savings:.3f}g CO2 per visit"
            )
        if render_blocking > 8:
            recommendations.append(
                f"Reduce render-blocking resources ({render_blocking} detected) by inlining critical CSS "
                "and deferring non-critical JavaScript"
            )

    if data.performance_score < 70:
        server_response_time = data.server_response_time or 0
        first_input_delay = data.first_input_delay or 0
        if server_response_time > 600:
            recommendations.append(
                f"Improve server response time (currently {round_half_up(server_response_time)}ms) "
                "by optimizing backend performance and using a CDN"
            )
        if first_input_delay > 100:
            recommendations.append(
                f"Reduce First Input Delay ({round_half_up(first_input_delay)}ms) by optimizing JavaScript "
                "execution and using web workers for heavy tasks"
            )

    if potential.total_potential_savings > co2.total_co2 * 0.2:
        recommendations.append(
            f"Significant optimization potential detected: "
            f"{potential.total_potential_savings:.3f}g CO2 savings possible per visit"
        )

    recommendations.extend(GENERAL_PAGESPEED_RECOMMENDATIONS)

    if co2.co2_rating in ("E", "F"):
        recommendations.append(
            "Critical: This website has a very high carbon footprint. Immediate optimization is recommended."
        )
    elif co2.co2_rating in ("A+", "A"):
        recommendations.append(
            "Excellent: This website has a low carbon footprint. Continue monitoring and optimizing."
        )

    return recommendations


# ============================================================================
# Overall score strategies
# ============================================================================

class EqualWeightStrategy:
    """Heuristic data: the four sub-scores, 25% each."""

    name = "equal-weight"

    def overall(self, scores: SubScores, data: AnalysisResult) -> int:
        return clamp_score(
            scores.energy_efficiency * 0.25
            + scores.carbon_footprint * 0.25
            + scores.resource_optimization * 0.25
            + scores.accessibility * 0.25
        )


class EmissionsWeightedStrategy:
    """Lab data: carbon weighs most, and the upstream performance score replaces accessibility."""

    name = "emissions-weighted"

    def overall(self, scores: SubScores, data: AnalysisResult) -> int:
        return clamp_score(
            scores.energy_efficiency * 0.25
            + scores.carbon_footprint * 0.35
            + scores.resource_optimization * 0.25
            + data.performance_score * 0.15
        )


EQUAL_WEIGHT = EqualWeightStrategy()
EMISSIONS_WEIGHTED = EmissionsWeightedStrategy()
