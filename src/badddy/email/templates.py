"""
badddy.email.templates

HTML bodies for transactional emails. Caller-supplied values are HTML-escaped.
"""

from __future__ import annotations

from html import escape

_STYLE = """
    body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Arial, sans-serif;
           line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;
           background-color: #f4f4f4; }
    .container { background-color: #ffffff; border-radius: 8px; padding: 40px;
                 box-shadow: 0 2px 4px rgba(0,0,0,0.1); }
    .logo { text-align: center; margin-bottom: 30px; }
    .logo h1 { color: #4F46E5; margin: 0; font-size: 32px; }
    .button { display: inline-block; padding: 14px 28px; background-color: #4F46E5;
              color: #ffffff !important; text-decoration: none; border-radius: 6px;
              font-weight: 600; margin: 20px 0; }
    .footer { text-align: center; margin-top: 30px; padding-top: 20px;
              border-top: 1px solid #e5e7eb; font-size: 14px; color: #6b7280; }
    .warning { background-color: #FEF3C7; border-left: 4px solid #F59E0B; padding: 12px;
               margin-top: 20px; border-radius: 4px; font-size: 14px; }
"""


def _layout(title: str, content: str) -> str:
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{escape(title)}</title>
  <style>{_STYLE}</style>
</head>
<body>
  <div class="container">
    <div class="logo"><h1>Badddy</h1></div>
    <div class="content">
{content}
    </div>
    <div class="footer">
      <p>This email was sent automatically, please do not reply.</p>
      <p>&copy; Badddy</p>
    </div>
  </div>
</body>
</html>
"""


def _button(url: str, label: str) -> str:
    href = escape(url, quote=True)
    return (
        f'<div style="text-align: center;"><a href="{href}" class="button">{escape(label)}</a></div>\n'
        f'<p>If the button does not work, copy this link into your browser:</p>\n'
        f'<p style="word-break: break-all; color: #4F46E5;">{escape(url)}</p>'
    )


def verification(user_name: str, verification_url: str) -> str:
    content = f"""
      <h2>Hello {escape(user_name)}!</h2>
      <p>Thanks for signing up to Badddy. Please confirm your email address to activate your account:</p>
      {_button(verification_url, "Verify my email")}
      <div class="warning">This link expires in 24 hours. If you did not create an account, ignore this email.</div>
"""
    return _layout("Verify your account", content)


def reset_password(user_name: str, reset_url: str) -> str:
    content = f"""
      <h2>Hello {escape(user_name)},</h2>
      <p>We received a request to reset the password of your Badddy account:</p>
      {_button(reset_url, "Reset my password")}
      <div class="warning">This link expires in 1 hour. If you did not ask for a reset, your password stays unchanged.</div>
"""
    return _layout("Reset your password", content)


def welcome(user_name: str) -> str:
    content = f"""
      <h2>Welcome {escape(user_name)}!</h2>
      <p>Your Badddy account is ready. You can now sign in and create your first organization.</p>
"""
    return _layout("Welcome to Badddy", content)

