from wanderplan.models.domain import Activity, DayPlan, Itinerary, TripSummary, UserRef
from wanderplan.services.export_service import pdf_filename, render_itinerary_pdf


def _itinerary() -> Itinerary:
    return Itinerary(
        itinerary_id="it-1",
        owner=UserRef("u1"),
        title="São Paulo - 2 Days Trip",
        destination="São Paulo",
        total_days=2,
        budget="R$ 2000",
        interests=["food"],
        days=[
            DayPlan(
                activities=[
                    Activity(time="10:00", title="Mercadão", description="Try the mortadella sandwich — it’s huge"),
                    Activity(time="15:00", title="Ibirapuera Park", description="", cost=0.0),
                ],
                total_cost=120.0,
                notes="Take the metro",
            ),
            DayPlan(),
        ],
        summary=TripSummary(total_estimated_cost="R$ 1800", highlights=["Food"], tips=["Carry cash 東京"]),
    )


def test_render_produces_pdf_bytes():
    content = render_itinerary_pdf(_itinerary())

    assert isinstance(content, bytes)
    assert content.startswith(b"%PDF")


def test_filename_is_slugged():
    assert pdf_filename(_itinerary()) == "s-o-paulo-2-days.pdf"
