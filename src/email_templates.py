"""
Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

NEWS_SUMMARY_EMAIL_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Market News Summary</title>
</head>
<body style="margin: 0; padding: 0; background-color: #050505; font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;">
    <table role="presentation" width="100%" cellspacing="0" cellpadding="0" style="background-color: #050505;">
        <tr>
            <td align="center" style="padding: 40px 20px;">
                <table role="presentation" width="100%" cellspacing="0" cellpadding="0" style="max-width: 600px; background-color: #141414; border-radius: 8px; border: 1px solid #30333A;">
                    <tr>
                        <td style="padding: 40px 40px 20px 40px;">
                            <h1 style="margin: 0; font-size: 24px; font-weight: 600; color: #FDD458;">Market News Summary Today</h1>
                            <p style="margin: 8px 0 0 0; font-size: 14px; color: #6b7280;">{{date}}</p>
                        </td>
                    </tr>
                    <tr>
                        <td style="padding: 0 40px 40px 40px; font-size: 16px; line-height: 1.6; color: #CCDADC;">
                            {{newsContent}}
                        </td>
                    </tr>
                    <tr>
                        <td style="padding: 20px 40px; border-top: 1px solid #30333A; font-size: 12px; color: #6b7280;">
                            You're receiving this because you subscribed to Signalist news updates.
                            This summary is for information only and is not investment advice.
                        </td>
                    </tr>
                </table>
            </td>
        </tr>
    </table>
</body>
</html>
"""
