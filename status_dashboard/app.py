from flask import Flask, jsonify, make_response, redirect, render_template, request, url_for

from .config import load_config
from .gate import AUTH_COOKIE, RequestGate, secrets_match
from .logs import log_event
from .provider import StatusProvider
from .snapshot import filter_tasks, group_tasks, records, section, summarize, task_categories


def create_app(config=None, provider=None):
    if config is None:
        config = load_config()
    if provider is None:
        provider = StatusProvider(config.status_path)

    app = Flask(__name__, static_folder=None)
    app.config["DASHBOARD"] = config
    gate = RequestGate(config.secret)

    @app.before_request
    def require_login():
        decision = gate.decide(request.path, request.cookies.get(AUTH_COOKIE))
        if not decision.allowed:
            return redirect(decision.target, code=302)
        return None

    @app.route("/")
    def dashboard():
        snapshot = provider.get_status()
        tasks = records(snapshot.get("tasks"))
        category = request.args.get("category") or None
        learning = section(snapshot, "learning")
        leaders = learning.get("thoughtLeaders")

        chips = [{"label": "All", "href": url_for("dashboard"), "active": category is None}]
        for name in task_categories(tasks):
            active = name == category
            # Clicking the active chip clears the filter.
            href = url_for("dashboard") if active else url_for("dashboard", category=name)
            chips.append({"label": name, "href": href, "active": active})

        return render_template(
            "dashboard.html",
            snapshot=snapshot,
            summary=summarize(snapshot),
            prs=records(snapshot.get("prs")),
            stats=section(snapshot, "stats"),
            learning=learning,
            leaders=[x for x in leaders if isinstance(x, str)] if isinstance(leaders, list) else [],
            chips=chips,
            columns=group_tasks(filter_tasks(tasks, category)),
        )

    @app.route("/api/status")
    def status():
        return jsonify(provider.get_status())

    @app.route("/login")
    def login():
        return render_template("login.html", error=None)

    @app.route("/api/auth", methods=["POST"])
    def auth():
        payload = request.get_json(silent=True)
        from_form = payload is None
        if from_form:
            password = request.form.get("password")
        else:
            password = payload.get("password") if isinstance(payload, dict) else None

        if not secrets_match(config.secret, password):
            log_event("warn", f"Rejected login attempt from {request.remote_addr}")
            if from_form:
                return render_template("login.html", error="Invalid password"), 401
            return jsonify({"error": "Invalid password"}), 401

        log_event("success", f"Dashboard login from {request.remote_addr}")
        if from_form:
            response = redirect("/", code=302)
        else:
            response = make_response(jsonify({"ok": True}))
        response.set_cookie(AUTH_COOKIE, config.secret, httponly=True,
                            samesite="Lax", path="/")
        return response

    @app.route("/logout")
    def logout():
        response = redirect("/login", code=302)
        response.delete_cookie(AUTH_COOKIE, path="/")
        return response

    return app
