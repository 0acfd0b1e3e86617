"""
MJML Email Templates
All email templates using MJML for responsive, cross-client compatibility
"""

from html import escape
from typing import Optional

from .config import SHOP_NAME

# Barbershop theme colors - gold/charcoal color scheme
THEME = {
    "primary": "#d4af37",
    "primary_dark": "#b8962e",
    "background": "#f4f4f4",
    "card_bg": "#ffffff",
    "text_primary": "#1c1c1c",
    "text_secondary": "#333333",
    "text_muted": "#6b6b6b",
    "border": "#e0e0e0",
    "success": "#2e9e5b",
    "danger": "#e62e2e",
}


def format_brl(amount: float) -> str:
    """Format an amount as Brazilian reais: R$ 1.234,50"""
    formatted = f"{amount:,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")
    return f"R$ {formatted}"


def get_base_template(
    title: str,
    preview_text: str,
    content_sections: str,
    cta_url: Optional[str] = None,
    cta_label: Optional[str] = None,
) -> str:
    """Base MJML template wrapper for all emails"""

    cta_section = ""
    if cta_url and cta_label:
        cta_section = f"""
        <mj-section background-color="#ffffff" padding="0 40px 40px 40px">
          <mj-column>
            <mj-button
              href="{escape(cta_url, quote=True)}"
              background-color="{THEME['primary']}"
              color="#1c1c1c"
              font-weight="600"
              border-radius="8px"
              padding="18px 40px"
              font-size="16px">
              {cta_label}
            </mj-button>
          </mj-column>
        </mj-section>
        """

    return f"""
    <mjml>
      <mj-head>
        <mj-title>{title}</mj-title>
        <mj-preview>{preview_text}</mj-preview>
        <mj-attributes>
          <mj-all font-family="Arial, 'Helvetica Neue', sans-serif" />
          <mj-text font-size="16px" line-height="1.6" color="{THEME['text_secondary']}" />
        </mj-attributes>
      </mj-head>
      <mj-body background-color="{THEME['background']}">
        <!-- Header -->
        <mj-section background-color="{THEME['text_primary']}" padding="24px 20px">
          <mj-column>
            <mj-text align="center" font-size="22px" font-weight="700" color="{THEME['primary']}" padding="0">
              {escape(SHOP_NAME)}
            </mj-text>
          </mj-column>
        </mj-section>

        <!-- Main Content -->
        <mj-section background-color="#ffffff" padding="32px 40px 24px 40px">
          <mj-column>
            <mj-text font-size="24px" font-weight="600" color="{THEME['text_primary']}" line-height="1.3" padding="0 0 16px 0">
              {title}
            </mj-text>

            {content_sections}
          </mj-column>
        </mj-section>

        {cta_section}

        <!-- Footer -->
        <mj-section padding="24px 20px">
          <mj-column>
            <mj-text align="center" font-size="13px" color="#94a3b8" padding="0">
              Este é um e-mail automático. Por favor, não responda.
            </mj-text>
          </mj-column>
        </mj-section>
      </mj-body>
    </mjml>
    """


def booking_confirmation_template(
    customer_name: str,
    date: str,
    time: str,
    service: str,
    price: float,
    pix_code: Optional[str] = None,
    card_checkout_url: Optional[str] = None,
) -> str:
    """Booking confirmation for the customer, with the pending payment details"""
    pix_section = ""
    if pix_code:
        pix_section = f"""
    <mj-text font-size="14px" color="{THEME['text_muted']}" padding="16px 0 4px 0">
      Pague com PIX copia e cola:
    </mj-text>
    <mj-text font-size="12px" font-family="monospace" color="{THEME['text_primary']}" padding="0 0 16px 0">
      {escape(pix_code)}
    </mj-text>
    """

    content = f"""
    <mj-text>
      Olá, {escape(customer_name)}!
    </mj-text>

    <mj-text>
      Seu horário está reservado.
    </mj-text>

    <mj-text padding="0 0 0 20px">
      📅 <strong>{escape(date)}</strong> às <strong>{escape(time)}</strong><br/>
      ✂️ Serviço: {escape(service)}<br/>
      💰 Valor: {format_brl(price)}
    </mj-text>

    {pix_section}

    <mj-text>
      Te esperamos lá!
    </mj-text>
    """

    return get_base_template(
        title="Agendamento Confirmado ✅",
        preview_text=escape(f"{date} às {time} - {service}"),
        content_sections=content,
        cta_url=card_checkout_url,
        cta_label="Pagar com cartão" if card_checkout_url else None,
    )


def new_booking_alert_template(
    customer_name: str,
    customer_email: str,
    service: str,
    date: str,
    time: str,
    price: float,
) -> str:
    """Alert for the shop owner when a customer books a slot"""
    content = f"""
    <mj-text>
      Um cliente acabou de marcar um horário:
    </mj-text>

    <mj-divider border-color="{THEME['border']}" border-width="1px" />

    <mj-text padding="0 0 0 20px">
      👤 <strong>Cliente:</strong> {escape(customer_name)}<br/>
      📧 <strong>E-mail:</strong> {escape(customer_email)}<br/>
      ✂️ <strong>Serviço:</strong> {escape(service)}<br/>
      📅 <strong>Data:</strong> {escape(date)}<br/>
      ⏰ <strong>Horário:</strong> {escape(time)}<br/>
      💰 <strong>Valor:</strong> {format_brl(price)}
    </mj-text>

    <mj-divider border-color="{THEME['border']}" border-width="1px" />

    <mj-text font-size="14px" color="{THEME['text_muted']}">
      Pagamento pendente. Acesse o painel admin para ver mais detalhes.
    </mj-text>
    """

    return get_base_template(
        title="🔔 Novo Agendamento!",
        preview_text=escape(f"Novo cliente: {customer_name} às {time}"),
        content_sections=content,
    )


def payment_confirmed_template(
    customer_name: str,
    date: str,
    time: str,
    service: str,
    price: float,
) -> str:
    """Payment confirmation for the customer"""
    content = f"""
    <mj-text>
      Olá, {escape(customer_name)}!
    </mj-text>

    <mj-text>
      Recebemos o seu pagamento. Seu horário está garantido.
    </mj-text>

    <mj-text align="center" font-size="32px" font-weight="700" color="{THEME['success']}" padding="20px 0">
      {format_brl(price)}
    </mj-text>

    <mj-text font-size="14px" color="{THEME['text_muted']}" padding="0 0 20px 0">
      Data: {escape(date)}<br/>
      Horário: {escape(time)}<br/>
      Serviço: {escape(service)}
    </mj-text>
    """

    return get_base_template(
        title="Pagamento Confirmado",
        preview_text=escape(f"✅ Pagamento recebido - {service}"),
        content_sections=content,
    )


def password_reset_template(reset_link: str) -> str:
    """Password reset MJML template"""
    content = f"""
    <mj-text>
      Recebemos um pedido para redefinir a sua senha.
    </mj-text>

    <mj-text>
      Clique no botão abaixo para escolher uma nova senha. O link expira em 1 hora.
    </mj-text>

    <mj-text font-size="14px" color="{THEME['text_muted']}">
      Se você não fez este pedido, ignore este e-mail. Sua senha continua a mesma.
    </mj-text>
    """

    return get_base_template(
        title="Redefinir Senha",
        preview_text="Redefina a sua senha",
        content_sections=content,
        cta_url=reset_link,
        cta_label="Redefinir senha",
    )


def welcome_email_template(user_name: str) -> str:
    """Welcome email MJML template"""
    content = f"""
    <mj-text>
      Olá, {escape(user_name)}!
    </mj-text>

    <mj-text>
      Sua conta foi criada com sucesso. Agora você pode agendar seus horários e
      acompanhar seus agendamentos pelo site.
    </mj-text>
    """

    return get_base_template(
        title="Bem-vindo! 👤",
        preview_text="Sua conta foi criada com sucesso",
        content_sections=content,
    )
