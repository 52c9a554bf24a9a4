from onboard_buddy.export.summary import FOOTER, ExportOptions, build_summary, mailto_link

__all__ = ["FOOTER", "ExportOptions", "build_summary", "mailto_link"]
