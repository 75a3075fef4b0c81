"""Flask web application for vehicle upkeep tracking."""

import logging
import os
from datetime import date
from pathlib import Path
from urllib.parse import urlsplit

from flask import (
    Flask,
    flash,
    g,
    redirect,
    render_template,
    request,
    session,
    url_for,
)

# Add parent directory to path for garage imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from garage import (
    FetchFailure,
    GarageStore,
    MissingReference,
    RecordNotFound,
    SessionManager,
    Status,
    TaxStatus,
    load_snapshot,
    parse_date,
    parse_odometer,
    part_statuses,
    service_statuses,
    sort_by_urgency,
    summarize_dashboard,
    tax_statuses,
)

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.secret_key = os.environ.get("SECRET_KEY", "dev-secret-key-change-in-prod")
app.config["GARAGE_FILE"] = os.environ.get(
    "UPKEEP_GARAGE_FILE", str(Path(__file__).parent.parent / "garage.yaml")
)


def _remember_user(user_id):
    """Keep the signed-in user in this client's signed session cookie."""
    if user_id:
        session["user_id"] = user_id
        flash(f"Signed in as {user_id}", "success")
    else:
        session.pop("user_id", None)
        flash("Signed out", "success")


def get_session_manager() -> SessionManager:
    """Session manager for the current request, seeded from the session cookie."""
    if "session_manager" not in g:
        manager = SessionManager(session.get("user_id"))
        manager.subscribe(_remember_user)
        g.session_manager = manager
    return g.session_manager


def current_user() -> str:
    return get_session_manager().user_id


def get_store() -> GarageStore:
    return GarageStore(app.config["GARAGE_FILE"])


def get_today() -> date:
    """Evaluation date; tests may pin it with `?today=YYYY-MM-DD`."""
    if app.config.get("TESTING"):
        return parse_date(request.args.get("today")) or date.today()
    return date.today()


def safe_next_url(value) -> str:
    """Local path to return to after a form post, or the taxes page."""
    value = value or ""
    parts = urlsplit(value)
    if (
        not value.startswith("/")
        or value.startswith("//")
        or "\\" in value
        or parts.scheme
        or parts.netloc
    ):
        return url_for("taxes")
    return value


def format_km(km):
    """Format km with comma separator."""
    if km is None:
        return "—"
    return f"{km:,.0f}"


def format_amount(amount):
    if amount is None:
        return "—"
    return f"{amount:,.2f}"


def format_date(value):
    """Format date for display."""
    if value is None or value == "":
        return "—"
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def format_days(days):
    if days is None:
        return "—"
    if days == 0:
        return "today"
    if days < 0:
        return f"{abs(days)} days late"
    return f"in {days} days"


def status_badge_color(status) -> str:
    """Get Tailwind color classes for status badge."""
    colors = {
        Status.OVERDUE: "bg-red-500 text-white",
        Status.URGENT: "bg-yellow-500 text-white",
        Status.OK: "bg-green-500 text-white",
        Status.UNKNOWN: "bg-gray-400 text-white",
        TaxStatus.OVERDUE: "bg-red-500 text-white",
        TaxStatus.UPCOMING: "bg-yellow-500 text-white",
        TaxStatus.PENDING: "bg-blue-500 text-white",
        TaxStatus.PAID: "bg-green-500 text-white",
    }
    return colors.get(status, "bg-gray-500 text-white")


def status_label(status) -> str:
    labels = {
        Status.OVERDUE: "Overdue",
        Status.URGENT: "Due soon",
        Status.OK: "OK",
        Status.UNKNOWN: "No odometer data",
        TaxStatus.OVERDUE: "Overdue",
        TaxStatus.UPCOMING: "Due soon",
        TaxStatus.PENDING: "Unpaid",
        TaxStatus.PAID: "Paid",
    }
    return labels.get(status, status.name)


# Register template filters
app.jinja_env.filters["format_km"] = format_km
app.jinja_env.filters["format_date"] = format_date
app.jinja_env.filters["format_amount"] = format_amount
app.jinja_env.filters["format_days"] = format_days
app.jinja_env.filters["status_badge_color"] = status_badge_color
app.jinja_env.filters["status_label"] = status_label


@app.before_request
def require_user():
    """Send anonymous visitors to the sign-in page."""
    if request.endpoint in ("login", "static"):
        return None
    if not get_session_manager().is_signed_in:
        return redirect(url_for("login"))
    return None


@app.errorhandler(FetchFailure)
def load_failed(error):
    """Show a load failure instead of an empty 'all clear' page."""
    logger.error("Garage data could not be loaded: %s", error)
    return render_template("error.html", message=str(error)), 503


@app.errorhandler(MissingReference)
def missing_vehicle(error):
    flash(str(error), "error")
    return redirect(url_for("index"))


@app.route("/login", methods=["GET", "POST"])
def login():
    if request.method == "POST":
        user_id = (request.form.get("user_id") or "").strip()
        if not user_id:
            flash("Please enter a user id", "error")
            return redirect(url_for("login"))
        get_session_manager().sign_in(user_id)
        return redirect(url_for("index"))
    return render_template("login.html")


@app.route("/logout", methods=["POST"])
def logout():
    get_session_manager().sign_out()
    return redirect(url_for("login"))


@app.route("/")
def index():
    """Dashboard: vehicle count and bounded attention lists."""
    store = get_store()
    snapshot = load_snapshot(store, current_user())
    policy = store.load_policy()
    today = get_today()
    dashboard = summarize_dashboard(snapshot, today, policy)
    by_id = snapshot.vehicles_by_id

    return render_template(
        "index.html",
        dashboard=dashboard,
        services=service_statuses(dashboard.upcoming_services, by_id, policy),
        parts=part_statuses(dashboard.parts_needing_replacement, by_id, policy),
        taxes=tax_statuses(dashboard.upcoming_taxes, today, by_id, policy),
        active_tab="dashboard",
    )


def _vehicle_snapshot():
    """Snapshot for the current user, narrowed by `?vehicle=` when given."""
    snapshot = load_snapshot(get_store(), current_user())
    vehicle_id = request.args.get("vehicle") or None
    if vehicle_id:
        snapshot = snapshot.for_vehicle(vehicle_id)
    return snapshot, vehicle_id


@app.route("/services")
def services():
    """All services tagged with their next-service status."""
    snapshot, vehicle_id = _vehicle_snapshot()
    items = service_statuses(
        snapshot.services, snapshot.vehicles_by_id, get_store().load_policy()
    )
    return render_template(
        "services.html",
        services=sort_by_urgency(items),
        vehicles=snapshot.vehicles,
        vehicle_id=vehicle_id,
        active_tab="services",
    )


@app.route("/parts")
def parts():
    """All parts tagged with their replacement status."""
    snapshot, vehicle_id = _vehicle_snapshot()
    items = part_statuses(
        snapshot.parts, snapshot.vehicles_by_id, get_store().load_policy()
    )
    return render_template(
        "parts.html",
        parts=sort_by_urgency(items),
        vehicles=snapshot.vehicles,
        vehicle_id=vehicle_id,
        active_tab="parts",
    )


@app.route("/taxes")
def taxes():
    """All taxes tagged with their payment status."""
    snapshot, vehicle_id = _vehicle_snapshot()
    items = tax_statuses(
        snapshot.taxes,
        get_today(),
        snapshot.vehicles_by_id,
        get_store().load_policy(),
    )
    return render_template(
        "taxes.html",
        taxes=sort_by_urgency(items),
        vehicles=snapshot.vehicles,
        vehicle_id=vehicle_id,
        active_tab="taxes",
    )


@app.route("/vehicle/<vehicle_id>")
def vehicle_detail(vehicle_id: str):
    """Vehicle detail page with its services, parts and taxes."""
    store = get_store()
    snapshot = load_snapshot(store, current_user())
    vehicle = snapshot.vehicles_by_id.get(vehicle_id)
    if vehicle is None:
        flash(f"Vehicle '{vehicle_id}' not found", "error")
        return redirect(url_for("index"))

    policy = store.load_policy()
    scoped = snapshot.for_vehicle(vehicle_id)
    return render_template(
        "vehicle.html",
        vehicle=vehicle,
        services=service_statuses(scoped.services, scoped.vehicles_by_id, policy),
        parts=part_statuses(scoped.parts, scoped.vehicles_by_id, policy),
        taxes=tax_statuses(scoped.taxes, get_today(), scoped.vehicles_by_id, policy),
        active_tab="vehicles",
    )


@app.route("/vehicle/<vehicle_id>/mileage", methods=["POST"])
def update_mileage(vehicle_id: str):
    """Handle odometer update form submission."""
    mileage = (request.form.get("mileage") or "").strip()
    if not mileage:
        flash("Please enter the odometer reading", "error")
        return redirect(url_for("vehicle_detail", vehicle_id=vehicle_id))

    # Accept thousands separators ("19.800")
    try:
        km = parse_odometer(mileage)
    except ValueError:
        flash("Invalid odometer value", "error")
        return redirect(url_for("vehicle_detail", vehicle_id=vehicle_id))

    get_store().update_vehicle_mileage(current_user(), vehicle_id, km)
    flash(f"Updated odometer to {km:,} km", "success")
    return redirect(url_for("vehicle_detail", vehicle_id=vehicle_id))


@app.route("/tax/<tax_id>/paid", methods=["POST"])
def mark_tax_paid(tax_id: str):
    """Mark a tax as paid today."""
    try:
        get_store().mark_tax_paid(current_user(), tax_id, date.today())
    except RecordNotFound:
        flash(f"Tax '{tax_id}' not found", "error")
    else:
        flash("Tax marked as paid", "success")
    return redirect(safe_next_url(request.form.get("next")))


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    # Using 5001 to avoid conflict with macOS AirPlay Receiver on 5000
    app.run(debug=True, host="0.0.0.0", port=5001)
