import sys

from flask import Flask, render_template, redirect, url_for, request, session, abort
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager, UserMixin, login_user, login_required, logout_user, current_user
from werkzeug.security import generate_password_hash, check_password_hash

from config import Config
from i18n import (
    DEFAULT_LOCALE,
    LOCALE_NAMES,
    SUPPORTED_LOCALES,
    Translator,
    get_i18n_paths,
    get_server_side_translations,
)
from toasts import Notifier, get_notifier
from ui import render_progress

app = Flask(__name__)
app.config.from_object(Config)
db = SQLAlchemy(app)
notifier = Notifier(app)

# Flask-Login setup
login_manager = LoginManager()
login_manager.login_view = 'login'
login_manager.init_app(app)

app.add_template_global(render_progress, name='progress_bar')

# Locale prefix for the dashboard pages, e.g. /ms/dashboard/goals
LOCALE_RULE = '<any({}):locale>'.format(', '.join(p['params']['locale'] for p in get_i18n_paths()))

# ==============================
# MODELS
# ==============================
class User(UserMixin, db.Model):
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(150), unique=True, nullable=False)
    password = db.Column(db.String(200), nullable=False)


@login_manager.user_loader
def load_user(user_id):
    return db.session.get(User, int(user_id))


@login_manager.unauthorized_handler
def unauthorized():
    get_notifier().notify(translate("toasts.login_required"))
    return redirect(url_for("login", next=request.path))

# ==============================
# HELPERS
# ==============================

def resolve_locale(locale=None):
    return locale or session.get('locale') or DEFAULT_LOCALE


def current_translator(locale=None, namespaces=None):
    props = get_server_side_translations(resolve_locale(locale), namespaces, locales_dir=app.config["LOCALES_DIR"])
    return Translator(props)


def translate(key, **params):
    return current_translator().t(key, **params)


def safe_next(default):
    target = request.args.get("next", "")
    if not target.startswith("/") or target.startswith("//"):
        return default
    return target


def render_localized(template, locale=None, namespaces=None, **context):
    locale = resolve_locale(locale)
    return render_template(
        template,
        t=current_translator(locale, namespaces),
        locale=locale,
        locale_names=LOCALE_NAMES,
        **context,
    )


def render_placeholder(page, locale):
    return render_localized('placeholder.html', locale=locale, page=page)

# ==============================
# ROUTES
# ==============================

@app.route("/")
def index():
    if current_user.is_authenticated:
        return redirect(url_for("budgets"))
    return redirect(url_for("login"))

@app.route("/register", methods=["GET", "POST"])
def register():
    if request.method == "POST":
        username = request.form.get("username", "").strip()
        password = request.form.get("password", "")

        if not username or not password:
            notifier.notify(translate("toasts.credentials_required"), variant="destructive")
            return redirect(url_for("register"))

        if User.query.filter_by(username=username).first():
            notifier.notify(translate("toasts.username_taken"), variant="destructive")
            return redirect(url_for("register"))

        new_user = User(username=username, password=generate_password_hash(password))
        db.session.add(new_user)
        db.session.commit()
        notifier.notify(translate("toasts.registered"), translate("toasts.please_log_in"))
        return redirect(url_for("login"))

    return render_localized("register.html")


@app.route("/login", methods=["GET", "POST"])
def login():
    if request.method == "POST":
        username = request.form.get("username")
        password = request.form.get("password")
        user = User.query.filter_by(username=username).first()

        if user and check_password_hash(user.password, password):
            login_user(user)
            return redirect(safe_next(url_for("budgets")))
        else:
            notifier.notify(translate("toasts.invalid_credentials"), variant="destructive")

    return render_localized("login.html")


@app.route("/logout", methods=["GET", "POST"])
@login_required
def logout():
    # End the session before building the redirect; errors propagate to the 500 handler
    username = current_user.username
    logout_user()
    app.logger.info("User %s signed out", username)
    response = redirect(url_for("login"))
    response.headers["Cache-Control"] = "no-store"
    return response


@app.route("/locale/<locale>")
def set_locale(locale):
    if locale not in SUPPORTED_LOCALES:
        abort(404)
    session["locale"] = locale
    return redirect(safe_next(url_for("budgets")))


@app.route("/toasts/<toast_id>/dismiss", methods=["POST"])
def dismiss_toast(toast_id):
    if not notifier.dismiss(toast_id):
        abort(404)
    return "", 204


@app.after_request
def no_store_for_signed_in(response):
    # Signed-in responses must never be served from the browser cache
    if current_user.is_authenticated:
        response.headers["Cache-Control"] = "no-store"
    return response

# ==============================
# DASHBOARD
# ==============================

@app.route("/dashboard")
@login_required
def dashboard():
    return redirect(url_for("budgets"))


@app.route("/dashboard/budgets", defaults={"locale": None})
@app.route(f"/{LOCALE_RULE}/dashboard/budgets")
@login_required
def budgets(locale):
    return render_placeholder("budgets", locale)


@app.route("/dashboard/goals", defaults={"locale": None})
@app.route(f"/{LOCALE_RULE}/dashboard/goals")
@login_required
def goals(locale):
    return render_placeholder("goals", locale)


@app.route("/dashboard/settings", defaults={"locale": None})
@app.route(f"/{LOCALE_RULE}/dashboard/settings")
@login_required
def settings(locale):
    return render_placeholder("settings", locale)

# ==============================
# ERRORS
# ==============================

@app.errorhandler(404)
def not_found(error):
    return render_template("error.html", code=404, message="Page not found"), 404


@app.errorhandler(500)
def server_error(error):
    app.logger.error("Unhandled error on %s: %s", request.path, error)
    return render_template("error.html", code=500, message="Something went wrong"), 500

# ==============================
# CLI COMMANDS
# ==============================
@app.cli.command("initdb")
def initdb():
    db.create_all()
    print("Database initialized!")


@app.cli.command("gen-secret")
def gen_secret():
    """Print a new random value for FINANCE_SECRET_KEY."""
    from auth_helpers import generate_auth_secret
    print(generate_auth_secret())


@app.cli.command("seed")
def seed():
    from seed import configure_logging, run_seed
    configure_logging()
    sys.exit(run_seed())


if __name__ == "__main__":
    with app.app_context():
        db.create_all()
    app.run(debug=True)
