app_name = "ciavaglia_atelier"
app_title = "Ciavaglia Atelier"
app_publisher = "Ciavaglia Timepieces"
app_description = "Watch configurator, checkout and order tracking for the Ciavaglia storefront"
app_email = "atelier@civagliatimepieces.com"
app_license = "mit"

# Apps
# ------------------

# required_apps = []

# Includes in <head>
# ------------------

# include js, css files in header of desk.html
# app_include_css = "/assets/ciavaglia_atelier/css/ciavaglia_atelier.css"
# app_include_js = "/assets/ciavaglia_atelier/js/ciavaglia_atelier.js"

# Installation
# ------------

# before_install = "ciavaglia_atelier.install.before_install"
after_install = "ciavaglia_atelier.ciavaglia_atelier.install.after_install"

# Fixtures
# --------

fixtures = [
	{"dt": "Role", "filters": [["name", "in", ["Atelier Admin"]]]},
]

# Scheduled Tasks
# ---------------

# scheduler_events = {
# 	"daily": [
# 		"ciavaglia_atelier.tasks.daily"
# 	],
# }

# Testing
# -------

# before_tests = "ciavaglia_atelier.install.before_tests"

# CORS Configuration
# ------------------
# The storefront runs on its own domain and calls the guest endpoints directly
website_cors = {
	"allowed_origins": [
		"https://www.civagliatimepieces.com",
		"https://civagliatimepieces.com",
	],
	"allowed_methods": ["GET", "POST", "OPTIONS"],
	"allowed_headers": ["Content-Type", "Authorization", "Stripe-Signature"],
	"expose_headers": ["Content-Length"],
	"max_age": 86400,
}

# Automatically update python controller files with type annotations for this app.
# export_python_type_annotations = True
