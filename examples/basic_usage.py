"""Basic usage examples for BrandPulse."""

from brandpulse import ArtifactProcessor, BrandAnalysisService
from brandpulse.core.models import Engagement, RawItem
from brandpulse.services.providers import build_provider_capabilities
from brandpulse.services.sources import FixtureSource


class CannedProvider:
    """Stands in for a text-generation provider."""

    def __init__(self, name, answer):
        self.name = name
        self.answer = answer

    def generate(self, prompt):
        return self.answer


def example_visibility():
    """Example: Visibility across providers."""
    print("🔍 Analyzing visibility: Tesla")

    providers = build_provider_capabilities() or (
        CannedProvider("demo-a", "Tesla is excellent and innovative. Tesla leads the electric vehicle market."),
        CannedProvider("demo-b", "Tesla has had some issues with service, but the product is popular."),
    )
    service = BrandAnalysisService(providers=providers)
    report = service.analyze_visibility("Tesla")

    print(f"📊 Overall visibility: {report.overall_score}/100 ({report.average_sentiment.value})")
    for result in report.provider_results:
        print(f"  {result.provider_name}: {result.visibility_score}/100, {result.mention_count} mentions")
    for insight in report.insights:
        print(f"  • {insight}")
    return report


def example_monitoring():
    """Example: Monitoring with fixture sources."""
    print("\n🔍 Monitoring mentions: Tesla")

    reddit = FixtureSource("reddit", [
        RawItem(
            url="https://www.reddit.com/r/cars/1",
            title="Tesla Model 3 review",
            content="Tesla delivers an amazing driving experience with great technology.",
            engagement=Engagement(upvotes=120, comments=30),
        ),
    ])
    hackernews = FixtureSource("hackernews", [
        RawItem(
            url="https://news.ycombinator.com/item?id=1",
            title="Tesla recall",
            content="Tesla announced a recall after customers reported problems.",
            engagement=Engagement(upvotes=15),
        ),
    ])
    service = BrandAnalysisService(sources=(reddit, hackernews))
    report = service.monitor_brand("Tesla")

    print(f"📊 {report.mention_count} mentions, credibility {report.credibility_score}")
    print(f"🏆 Top sources: {', '.join(report.top_sources)}")
    return report


def example_artifacts(visibility_report, monitor_report):
    """Example: Wrapping reports into categorized artifacts."""
    print("\n🗂️ Categorizing artifacts")

    processor = ArtifactProcessor()
    for tool, report in (("visibility", visibility_report), ("monitor", monitor_report)):
        artifact = processor.process(tool, report)
        print(f"  {artifact.title}: {artifact.category}, priority {artifact.priority}, "
              f"{len(artifact.related_artifacts)} related")
        print(f"    tags: {', '.join(artifact.tags)}")


if __name__ == "__main__":
    visibility = example_visibility()
    monitoring = example_monitoring()
    example_artifacts(visibility, monitoring)
