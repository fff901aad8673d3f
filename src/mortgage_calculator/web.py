"""
Flask web front end for the mortgage repayment calculator.

Single-file app using render_template_string.  The form posts back to ``/``
for calculate / clear; a small script calls ``/api/normalize/<field>`` on
every keystroke so the fields are reformatted while the user types.
Run via ``mortgage-calculator-web`` (localhost:5000 by default).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from flask import Flask, jsonify, render_template_string, request

from .config import (
    FIELD_LABELS,
    MORTGAGE_TYPES,
    NUMERIC_FIELDS,
    TYPE_LABELS,
    WEB_HOST,
    WEB_LOG_LEVEL,
    WEB_PORT,
)
from .logs import configure_logging
from .normalizer import normalize
from .calculator import MortgageResult
from .session import MortgageSession, View, session_from_form

logger = logging.getLogger(__name__)

app = Flask(__name__)

# ═══════════════════════════════════════════════════════════════════
# Form parsing
# ═══════════════════════════════════════════════════════════════════

def _mortgage_type(values: Mapping[str, Any]) -> Optional[str]:
    value = values.get("mortgage_type")
    return value if value in MORTGAGE_TYPES else None


def parse_form(values: Mapping[str, Any]) -> MortgageSession:
    """Replay submitted values through the normalisers into a fresh session."""
    return session_from_form(
        amount=str(values.get("amount", "") or ""),
        term=str(values.get("term", "") or ""),
        rate=str(values.get("rate", "") or ""),
        mortgage_type=_mortgage_type(values),
    )


def previous_result(values: Mapping[str, Any]) -> Optional[MortgageResult]:
    """Recompute the result the page was showing from its hidden fields."""
    if not values.get("shown_amount"):
        return None
    shown = session_from_form(
        amount=str(values.get("shown_amount", "")),
        term=str(values.get("shown_term", "")),
        rate=str(values.get("shown_rate", "")),
        mortgage_type=_mortgage_type({"mortgage_type": values.get("shown_type")}),
    )
    return shown.calculate()


# ═══════════════════════════════════════════════════════════════════
# HTML Template
# ═══════════════════════════════════════════════════════════════════

HTML_TEMPLATE = r"""
<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>Mortgage Repayment Calculator</title>
<style>
  *{margin:0;padding:0;box-sizing:border-box}
  body{font-family:system-ui,-apple-system,sans-serif;background:#e3f4fc;color:#133041;min-height:100vh;
       display:flex;align-items:center;justify-content:center;padding:1.5rem}
  .card{display:grid;grid-template-columns:1fr 1fr;background:#fff;border-radius:24px;max-width:1000px;width:100%;overflow:hidden}
  form{padding:2.5rem}
  .head{display:flex;justify-content:space-between;align-items:baseline;margin-bottom:1.5rem}
  .head button{background:none;border:none;text-decoration:underline;color:#4e6e7e;cursor:pointer}
  .form-group{margin-bottom:1.25rem}
  label{display:block;color:#4e6e7e;margin-bottom:.5rem}
  .input-wrapper{display:flex;border:1px solid #6b94a8;border-radius:4px;overflow:hidden}
  .input-wrapper span{background:#e3f4fc;padding:.7rem 1rem;font-weight:700;color:#4e6e7e}
  .input-wrapper input{flex:1;border:none;padding:.7rem 1rem;font-size:1rem;font-weight:700;outline:none}
  .input-wrapper.error{border-color:#d73328}
  .input-wrapper.error span{background:#d73328;color:#fff}
  .error-message{display:none;color:#d73328;font-size:.85rem;margin-top:.4rem}
  .has-error .error-message{display:block}
  .row{display:grid;grid-template-columns:1fr 1fr;gap:1.5rem}
  .radio-option{display:block;border:1px solid #6b94a8;border-radius:4px;padding:.7rem 1rem;margin-bottom:.6rem;font-weight:700;cursor:pointer}
  .radio-option.selected{background:#fafae0;border-color:#d8db2f}
  .calculate{background:#d8db2f;border:none;border-radius:999px;padding:1rem 2.5rem;font-weight:700;font-size:1rem;cursor:pointer}
  .results{background:#133041;color:#fff;padding:2.5rem;border-bottom-left-radius:80px}
  .empty-state{text-align:center;color:#9abed5}
  .empty-state h2{color:#fff;margin-bottom:1rem}
  .results-box{background:#0e2431;border-top:4px solid #d8db2f;border-radius:8px;padding:2rem;margin-top:1.5rem}
  .monthly{font-size:3.5rem;color:#d8db2f;font-weight:700}
  .total{font-size:1.5rem;font-weight:700}
  hr{border:none;border-top:1px solid #4e6e7e;margin:1.5rem 0}
  @media (max-width:760px){.card{grid-template-columns:1fr}.row{grid-template-columns:1fr}}
</style>
</head>
<body>
<main class="card">
  <form method="post" action="/" novalidate>
    <div class="head">
      <h1>Mortgage Calculator</h1>
      <button type="submit" name="action" value="clear">Clear All</button>
    </div>

    {% macro field(name, prefix=None, suffix=None) %}
    <div class="form-group{% if session.is_invalid(name) %} has-error{% endif %}">
      <label for="{{ name }}">{{ labels[name] }}</label>
      <div class="input-wrapper{% if session.is_invalid(name) %} error{% endif %}" id="{{ name }}Wrapper">
        {% if prefix %}<span>{{ prefix }}</span>{% endif %}
        <input type="text" inputmode="decimal" id="{{ name }}" name="{{ name }}"
               value="{{ inputs[name] }}" data-normalize="{{ name }}">
        {% if suffix %}<span>{{ suffix }}</span>{% endif %}
      </div>
      <p class="error-message">{{ errors[name] if name in errors else "This field is required" }}</p>
    </div>
    {% endmacro %}

    {{ field("amount", prefix="£") }}
    <div class="row">
      {{ field("term", suffix="years") }}
      {{ field("rate", suffix="%") }}
    </div>

    <div class="form-group{% if session.is_invalid('type') %} has-error{% endif %}">
      <label>{{ labels["type"] }}</label>
      {% for value in types %}
      <label class="radio-option{% if session.is_selected(value) %} selected{% endif %}">
        <input type="radio" name="mortgage_type" value="{{ value }}"{% if session.is_selected(value) %} checked{% endif %}>
        {{ type_labels[value] }}
      </label>
      {% endfor %}
      <p class="error-message" id="typeError">This field is required</p>
    </div>

    {% if session.result %}
    <input type="hidden" name="shown_amount" value="{{ '{:f}'.format(session.result.principal) }}">
    <input type="hidden" name="shown_term" value="{{ session.result.years }}">
    <input type="hidden" name="shown_rate" value="{{ '{:f}'.format(session.result.annual_rate_percent) }}">
    <input type="hidden" name="shown_type" value="{{ session.result.mortgage_type }}">
    {% endif %}
    <button class="calculate" type="submit" name="action" value="calculate">Calculate Repayments</button>
  </form>

  <section class="results">
    {% if view == "results" %}
    <div id="resultsContent">
      <h2>Your results</h2>
      <p>Your results are shown below based on the information you provided.
         To adjust the results, edit the form and click "calculate repayments" again.</p>
      <div class="results-box">
        <p>Your monthly repayments</p>
        <p class="monthly" id="monthlyPayment">{{ session.result.monthly_payment_display }}</p>
        <hr>
        <p>Total you'll repay over the term</p>
        <p class="total" id="totalRepayment">{{ session.result.total_repayment_display }}</p>
      </div>
    </div>
    {% else %}
    <div class="empty-state" id="emptyState">
      <h2>Results shown here</h2>
      <p>Complete the form and click "calculate repayments" to see what
         your monthly repayments would be.</p>
    </div>
    {% endif %}
  </section>
</main>

<script>
  document.querySelectorAll("[data-normalize]").forEach(function (input) {
    input.addEventListener("input", async function () {
      const field = input.dataset.normalize;
      const sent = input.value;
      const resp = await fetch("/api/normalize/" + field, {
        method: "POST",
        headers: {"Content-Type": "application/json"},
        body: JSON.stringify({value: sent}),
      });
      if (!resp.ok) return;
      const data = await resp.json();
      // A newer keystroke has changed the field since this request went out
      if (input.value !== sent) return;
      input.value = data.value;
      if (data.valid) {
        const wrapper = document.getElementById(field + "Wrapper");
        wrapper.classList.remove("error");
        wrapper.closest(".form-group").classList.remove("has-error");
      }
    });
  });
  document.querySelectorAll("input[name=mortgage_type]").forEach(function (radio) {
    radio.addEventListener("change", function () {
      document.querySelectorAll(".radio-option").forEach(function (option) {
        option.classList.toggle("selected", option.contains(radio));
      });
      document.getElementById("typeError").closest(".form-group").classList.remove("has-error");
    });
  });
</script>
</body>
</html>
"""


def render_page(session: MortgageSession) -> str:
    inputs = {name: getattr(session.inputs, name) for name in NUMERIC_FIELDS}
    return render_template_string(
        HTML_TEMPLATE,
        session=session,
        inputs=inputs,
        errors={name: error.message for name, error in session.errors.items()},
        labels=FIELD_LABELS,
        types=MORTGAGE_TYPES,
        type_labels=TYPE_LABELS,
        view=session.view.value,
    )


# ═══════════════════════════════════════════════════════════════════
# Routes
# ═══════════════════════════════════════════════════════════════════

@app.route("/", methods=["GET", "POST"])
def index():
    if request.method == "GET":
        return render_page(MortgageSession())

    session = parse_form(request.form)
    session.result = previous_result(request.form)
    action = request.form.get("action", "calculate")
    if action == "clear":
        session.clear()
    elif session.calculate() is None:
        logger.info("Form rejected: %s", ", ".join(sorted(session.invalid)))
        return render_page(session), 422
    return render_page(session)


@app.route("/api/normalize/<field>", methods=["POST"])
def api_normalize(field: str):
    if field not in NUMERIC_FIELDS:
        return jsonify({"error": f"Unknown field '{field}'"}), 404
    payload = request.get_json(silent=True) or {}
    value = normalize(field, str(payload.get("value", "")))  # type: ignore[arg-type]
    return jsonify({"field": field, "value": value, "valid": bool(value)})


@app.route("/api/calculate", methods=["POST"])
def api_calculate():
    payload: Dict[str, Any] = request.get_json(silent=True) or {}
    session = parse_form(payload)
    result = session.calculate()
    if result is None:
        errors = {name: error.message for name, error in session.errors.items()}
        return jsonify({"errors": errors}), 422
    return jsonify({
        "mortgage_type": result.mortgage_type,
        "monthly_payment": result.monthly_payment_display,
        "total_repayment": result.total_repayment_display,
        "view": View.RESULTS.value,
    })


def run_web(debug: bool = False) -> None:
    """Start the Flask development server."""
    configure_logging(WEB_LOG_LEVEL)
    print(f"Starting web app at http://{WEB_HOST}:{WEB_PORT}")
    app.run(host=WEB_HOST, port=WEB_PORT, debug=debug)


if __name__ == "__main__":
    run_web()
