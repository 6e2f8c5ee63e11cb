def ros_theme():
    font = "Open Sans"

    return {
        "config": {
            "view": {"stroke": None},
            "title": {"fontSize": 16, "font": font},
            "axis": {
                "titleFontSize": 14,
                "labelFontSize": 12,
                "labelFont": font,
                "titleFont": font,
                "grid": False,
            },
            "legend": {"titleFontSize": 14, "labelFontSize": 12, "font": font},
            "mark": {
                "fontSize": 13,
                "tooltip": {"content": "encoding"},
                "font": font,
            },
        }
    }
