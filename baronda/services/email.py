"""Send emails (OTP codes, access codes, staff decisions, report replies) via SMTP."""

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape
from typing import Optional

from baronda.core.config import settings

logger = logging.getLogger(__name__)

# Avoid blocking the request forever if SMTP is slow or unreachable
SMTP_TIMEOUT_SECONDS = 15

BRAND_COLOR = "#FF7426"
ADMIN_COLOR = "#6f42c1"

OTP_TEMPLATES = {
    "userRegistration": (
        "Kode Verifikasi Akun Baronda Anda",
        "Verifikasi Akun Anda",
        "Gunakan kode berikut untuk menyelesaikan proses pendaftaran Anda.",
    ),
    "staffRegistration": (
        "Kode Verifikasi Pendaftaran Petugas Baronda",
        "Verifikasi Pendaftaran Petugas",
        "Gunakan kode berikut untuk memverifikasi pendaftaran Anda sebagai petugas.",
    ),
    "staffResetAccessCode": (
        "Permintaan Atur Ulang Kode Akses Petugas Baronda",
        "Atur Ulang Kode Akses",
        "Kami menerima permintaan untuk mengatur ulang kode akses Anda. Gunakan kode OTP di bawah ini untuk verifikasi.",
    ),
    "userPasswordReset": (
        "Kode Atur Ulang Kata Sandi Baronda",
        "Atur Ulang Kata Sandi",
        "Gunakan kode berikut untuk mengatur ulang kata sandi akun Anda.",
    ),
    "adminCreation": (
        "Kode Konfirmasi Pembuatan Admin Baronda",
        "Konfirmasi Pembuatan Admin",
        "Anda (Super Admin) mencoba untuk membuat akun admin baru. Gunakan kode berikut untuk mengonfirmasi tindakan ini.",
    ),
    "emailChange": (
        "Kode Verifikasi Perubahan Email Baronda",
        "Verifikasi Email Baru",
        "Gunakan kode berikut untuk mengonfirmasi alamat email baru Anda.",
    ),
}


def _layout(title: str, body_html: str, color: str = BRAND_COLOR) -> str:
    return f"""
<!DOCTYPE html>
<html lang="id">
<head><meta charset="utf-8"></head>
<body style="font-family: Arial, sans-serif; max-width: 600px; margin: auto; border: 1px solid #ddd; border-radius: 10px; overflow: hidden;">
  <div style="background-color: {color}; color: white; padding: 20px; text-align: center;">
    <img src="{settings.APP_LOGO_URL}" alt="{settings.APP_NAME} Logo" style="width: 80px; height: auto; margin-bottom: 10px;">
    <h1 style="margin: 0; font-size: 24px;">{title}</h1>
  </div>
  <div style="padding: 30px; text-align: center; color: #333;">
    {body_html}
  </div>
  <div style="background-color: #f9f9f9; padding: 20px; text-align: center; font-size: 12px; color: #888;">
    <p style="margin: 0;">{settings.APP_NAME} - {settings.APP_TAGLINE}</p>
  </div>
</body>
</html>
"""


def _code_block(code: str) -> str:
    return (
        '<div style="background-color: #f2f2f2; border-radius: 5px; margin: 20px 0; padding: 15px;">'
        f'<p style="font-size: 36px; font-weight: bold; letter-spacing: 8px; margin: 0;">{escape(code)}</p>'
        "</div>"
    )


def send_email(
    to_email: str,
    subject: str,
    html: str,
    text: Optional[str] = None,
    from_name: Optional[str] = None,
) -> bool:
    """
    Send one HTML email (with optional plain-text part).
    Returns True if sent, False if SMTP not configured or send failed.
    """
    if not settings.SMTP_HOST or not settings.SMTP_USER:
        logger.warning("SMTP not configured (SMTP_HOST/SMTP_USER). Skipping send.")
        return False

    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = f"{from_name or settings.SMTP_FROM_NAME} <{settings.SMTP_FROM_EMAIL}>"
    msg["To"] = to_email
    if text:
        msg.attach(MIMEText(text, "plain"))
    msg.attach(MIMEText(html, "html"))

    smtp_cls = smtplib.SMTP_SSL if settings.SMTP_USE_SSL else smtplib.SMTP
    try:
        with smtp_cls(settings.SMTP_HOST, settings.SMTP_PORT, timeout=SMTP_TIMEOUT_SECONDS) as server:
            if not settings.SMTP_USE_SSL:
                server.starttls()
            server.login(settings.SMTP_USER, settings.SMTP_PASSWORD)
            server.sendmail(settings.SMTP_FROM_EMAIL, [to_email], msg.as_string())
        logger.info("Email '%s' sent to %s", subject, to_email)
        return True
    except smtplib.SMTPAuthenticationError as e:
        logger.exception("SMTP login failed for %s: %s", to_email, e)
        return False
    except (OSError, TimeoutError) as e:
        logger.exception("SMTP connection error (timeout or network) for %s: %s", to_email, e)
        return False
    except smtplib.SMTPException as e:
        logger.exception("Failed to send email to %s: %s", to_email, e)
        return False


def send_otp_email(to_email: str, code: str, context: str, expire_minutes: int) -> bool:
    subject, title, intro = OTP_TEMPLATES.get(context, OTP_TEMPLATES["userRegistration"])
    color = ADMIN_COLOR if context == "adminCreation" else BRAND_COLOR
    body = (
        f'<p style="font-size: 16px;">{intro} Kode ini berlaku selama {expire_minutes} menit.</p>'
        f"{_code_block(code)}"
        '<p style="font-size: 14px; color: #666;">Jika Anda tidak merasa meminta kode ini, mohon abaikan email ini.</p>'
    )
    text = f"{intro}\n\nKode Anda: {code}\nBerlaku selama {expire_minutes} menit."
    return send_email(to_email, subject, _layout(title, body, color), text)


def send_access_code_email(to_email: str, name: str, access_code: str, *, updated: bool = False) -> bool:
    if updated:
        subject = "Pembaruan Kode Akses Petugas Baronda Anda"
        title = "Kode Akses Berhasil Diubah"
        intro = f"Halo {escape(name)}, kode akses Anda telah berhasil diperbarui. Berikut adalah kode akses rahasia Anda yang baru."
    else:
        subject = "Kode Akses Petugas Baronda Anda"
        title = "Informasi Kode Akses"
        intro = f"Halo {escape(name)}, berikut adalah kode akses rahasia Anda untuk masuk ke dasbor petugas."
    body = (
        f'<p style="font-size: 16px;">{intro} Jangan bagikan kode ini kepada siapapun.</p>'
        f"{_code_block(access_code)}"
        '<p style="font-size: 14px; color: #666;">Gunakan kode ini untuk login di halaman login petugas.</p>'
    )
    return send_email(to_email, subject, _layout(title, body))


def send_staff_approved_email(to_email: str, name: str, access_code: str) -> bool:
    body = (
        f'<p style="font-size: 16px;">Halo {escape(name)}, pendaftaran Anda sebagai petugas Baronda telah disetujui.</p>'
        '<p style="font-size: 16px;">Berikut adalah kode akses rahasia Anda. Jangan bagikan kode ini kepada siapapun.</p>'
        f"{_code_block(access_code)}"
        '<p style="font-size: 14px; color: #666;">Gunakan kode ini bersama email Anda di halaman login petugas.</p>'
    )
    return send_email(
        to_email,
        "Selamat! Pendaftaran Petugas Baronda Anda Disetujui",
        _layout("Pendaftaran Disetujui", body),
    )


def send_staff_rejected_email(to_email: str, name: str, reason: str) -> bool:
    body = (
        f'<p style="font-size: 16px;">Halo {escape(name)}, mohon maaf, pendaftaran Anda sebagai petugas belum dapat kami setujui.</p>'
        '<div style="background-color: #f2f2f2; border-radius: 5px; margin: 20px 0; padding: 15px; text-align: left;">'
        f'<p style="margin: 0;"><strong>Alasan:</strong> {escape(reason)}</p>'
        "</div>"
        '<p style="font-size: 14px; color: #666;">Anda dapat mendaftar kembali setelah memenuhi persyaratan.</p>'
    )
    return send_email(
        to_email,
        "Pembaruan Mengenai Pendaftaran Petugas Baronda Anda",
        _layout("Pendaftaran Ditolak", body, "#dc3545"),
    )


def send_admin_verification_email(to_email: str, name: str, link: str, expire_minutes: int) -> bool:
    body = (
        f'<p style="font-size: 16px;">Halo {escape(name)}, Anda didaftarkan sebagai admin Baronda oleh Super Admin.</p>'
        '<p style="font-size: 16px;">Klik tombol di bawah ini untuk mengonfirmasi pendaftaran Anda.</p>'
        f'<p style="margin: 24px 0;"><a href="{escape(link)}" style="display: inline-block; padding: 12px 24px; '
        f'background-color: {ADMIN_COLOR}; color: white; text-decoration: none; border-radius: 6px;">Konfirmasi Akun</a></p>'
        f'<p style="font-size: 14px; color: #666;">Tautan ini berlaku selama {expire_minutes} menit.</p>'
    )
    text = f"Konfirmasi pendaftaran admin Baronda: {link}\nBerlaku selama {expire_minutes} menit."
    return send_email(
        to_email,
        "Konfirmasi Pendaftaran Admin Baronda",
        _layout("Konfirmasi Pendaftaran Admin", body, ADMIN_COLOR),
        text,
    )


def send_admin_welcome_email(to_email: str, name: str, access_code: str) -> bool:
    body = (
        f'<p style="font-size: 16px;">Halo {escape(name)}, akun admin Anda telah dibuat. Berikut adalah kode akses rahasia Anda.</p>'
        f"{_code_block(access_code)}"
        '<p style="font-size: 14px; color: #666;">Gunakan kode ini bersama email Anda di halaman login petugas.</p>'
    )
    return send_email(
        to_email,
        "Selamat! Akun Admin Baronda Anda Telah Dibuat",
        _layout("Akun Admin Dibuat", body, ADMIN_COLOR),
    )


def send_report_reply_email(to_email: str, reporter_name: str, report_text: str, reply: str, replier_role: str) -> bool:
    excerpt = report_text if len(report_text) <= 200 else report_text[:197] + "..."
    body = (
        f'<p style="font-size: 16px;">Halo {escape(reporter_name)}, laporan Anda telah ditanggapi oleh {escape(replier_role)}.</p>'
        '<div style="background-color: #f2f2f2; border-radius: 5px; margin: 20px 0; padding: 15px; text-align: left;">'
        f'<p style="margin: 0 0 8px 0; color: #666;"><em>{escape(excerpt)}</em></p>'
        f'<p style="margin: 0;">{escape(reply)}</p>'
        "</div>"
    )
    return send_email(to_email, "Tanggapan atas Laporan Anda", _layout("Tanggapan Laporan", body))
