def get_data():
	return [
		{
			"module_name": "Ciavaglia Atelier",
			"color": "#1f2a44",
			"icon": "octicon octicon-clock",
			"label": "Ciavaglia Atelier",
			"items": [
				{"type": "doctype", "name": "CT-Watch-Function"},
				{"type": "doctype", "name": "CT-Configurator-Step"},
				{"type": "doctype", "name": "CT-Configurator-Option"},
				{"type": "doctype", "name": "CT-Configurator-Addon"},

				{"type": "doctype", "name": "CT-Built-Watch"},
				{"type": "doctype", "name": "CT-Watch-Configuration"},
				{"type": "doctype", "name": "CT-Watch-Order"},

				{"type": "doctype", "name": "CT-Atelier-Settings"},
			],
		}
	]
