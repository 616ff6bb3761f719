"""
Event Handlers - Processadores de Eventos de Domínio.

Handlers são executados de forma assíncrona via Celery quando
Domain Events são publicados (``EVENT_PUBLISHER_MODE=celery``).

Tipos de tarefa:
- Handlers: um por evento, roteados por ``dispatch_domain_event``
- Notificação: ``enviar_email``
- Métricas: ``registrar_metrica``
- Agendadas (Celery Beat): verificação de status, expiração de
  convites, limpeza de verificações, relatório diário e limpeza
  do Event Store

Padrão:
    @shared_task(**HANDLER_OPTIONS)
    def handle_<evento>(self, event_data: dict) -> None:
        dados = event_data["data"]
        ...

``event_data`` tem o formato de ``DomainEvent.to_dict()``.
"""

import logging
from datetime import datetime, timedelta
from smtplib import SMTPException
from typing import Any, Dict, List, Optional

from celery import shared_task
from celery.exceptions import MaxRetriesExceededError
from django.conf import settings
from django.core.mail import send_mail

from . import emails

logger = logging.getLogger(__name__)

HANDLER_OPTIONS = dict(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)


def _dados(event_data: Dict[str, Any]) -> Dict[str, Any]:
    return event_data.get('data') or {}


# =============================================================================
# Event Handlers - Custodiados
# =============================================================================

@shared_task(**HANDLER_OPTIONS)
def handle_custodiado_cadastrado(self, event_data: Dict[str, Any]) -> None:
    """
    Ações:
    - Registrar métrica por comarca
    """
    dados = _dados(event_data)
    logger.info(
        f"[HANDLER] CustodiadoCadastrado: {event_data.get('aggregate_id')} | "
        f"Processo: {dados.get('processo')} | Comarca: {dados.get('comarca')}"
    )
    registrar_metrica.delay(
        metric_name='custodiados_cadastrados',
        value=1,
        tags={'comarca': dados.get('comarca') or ''},
    )


@shared_task(**HANDLER_OPTIONS)
def handle_custodiado_atualizado(self, event_data: Dict[str, Any]) -> None:
    dados = _dados(event_data)
    logger.info(
        f"[HANDLER] CustodiadoAtualizado: {event_data.get('aggregate_id')} | "
        f"Campos: {', '.join(dados.get('campos_alterados') or [])}"
    )


@shared_task(**HANDLER_OPTIONS)
def handle_custodiado_arquivado(self, event_data: Dict[str, Any]) -> None:
    dados = _dados(event_data)
    logger.info(
        f"[HANDLER] CustodiadoArquivado: {event_data.get('aggregate_id')} | "
        f"Processo: {dados.get('processo')} | Por: {dados.get('arquivado_por')}"
    )
    registrar_metrica.delay(metric_name='custodiados_arquivados', value=1)


@shared_task(**HANDLER_OPTIONS)
def handle_custodiado_reativado(self, event_data: Dict[str, Any]) -> None:
    dados = _dados(event_data)
    logger.info(
        f"[HANDLER] CustodiadoReativado: {event_data.get('aggregate_id')} | "
        f"Status: {dados.get('status')} | Próximo: {dados.get('proximo_comparecimento')}"
    )
    registrar_metrica.delay(metric_name='custodiados_reativados', value=1)


@shared_task(**HANDLER_OPTIONS)
def handle_status_custodiado_alterado(self, event_data: Dict[str, Any]) -> None:
    """
    Ações:
    - Alertar no log quando o custodiado fica inadimplente
    - Registrar métrica da transição
    """
    dados = _dados(event_data)
    status_novo = dados.get('status_novo')

    if status_novo == 'Inadimplente':
        logger.warning(
            f"[HANDLER] Custodiado {event_data.get('aggregate_id')} inadimplente | "
            f"Atraso: {dados.get('dias_atraso')} dias | "
            f"Previsto: {dados.get('proximo_comparecimento')}"
        )
    else:
        logger.info(f"[HANDLER] Custodiado {event_data.get('aggregate_id')} regularizado")

    registrar_metrica.delay(
        metric_name='status_custodiado_alterado',
        value=1,
        tags={'de': dados.get('status_anterior') or '', 'para': status_novo or ''},
    )


@shared_task(**HANDLER_OPTIONS)
def handle_endereco_alterado(self, event_data: Dict[str, Any]) -> None:
    dados = _dados(event_data)
    logger.info(
        f"[HANDLER] EnderecoAlterado: custodiado {event_data.get('aggregate_id')} | "
        f"Novo endereço em {dados.get('cidade')}/{dados.get('estado')}"
    )
    registrar_metrica.delay(
        metric_name='mudancas_endereco',
        value=1,
        tags={'estado': dados.get('estado') or ''},
    )


# =============================================================================
# Event Handlers - Comparecimentos
# =============================================================================

@shared_task(**HANDLER_OPTIONS)
def handle_comparecimento_registrado(self, event_data: Dict[str, Any]) -> None:
    dados = _dados(event_data)
    logger.info(
        f"[HANDLER] ComparecimentoRegistrado: {event_data.get('aggregate_id')} | "
        f"Custodiado: {dados.get('custodiado_id')} | Tipo: {dados.get('tipo_validacao')}"
    )
    registrar_metrica.delay(
        metric_name='comparecimentos_registrados',
        value=1,
        tags={'tipo': dados.get('tipo_validacao') or ''},
    )


@shared_task(**HANDLER_OPTIONS)
def handle_cadastros_iniciais_migrados(self, event_data: Dict[str, Any]) -> None:
    dados = _dados(event_data)
    logger.info(
        f"[HANDLER] CadastrosIniciaisMigrados: {dados.get('custodiados_migrados')} "
        f"de {dados.get('total_custodiados')} custodiados"
    )


# =============================================================================
# Event Handlers - Usuários e Convites
# =============================================================================

@shared_task(**HANDLER_OPTIONS)
def handle_convite_criado(self, event_data: Dict[str, Any]) -> None:
    """
    Ações:
    - Enviar email com o link do convite
    """
    dados = _dados(event_data)
    logger.info(f"[HANDLER] ConviteCriado: {event_data.get('aggregate_id')} | Email: {dados.get('email')}")

    assunto, corpo = emails.email_convite(dados)
    enviar_email.delay(dados.get('email'), assunto, corpo)


@shared_task(**HANDLER_OPTIONS)
def handle_convite_reenviado(self, event_data: Dict[str, Any]) -> None:
    dados = _dados(event_data)
    logger.info(f"[HANDLER] ConviteReenviado: {event_data.get('aggregate_id')} | Email: {dados.get('email')}")

    assunto, corpo = emails.email_convite(dados)
    enviar_email.delay(dados.get('email'), assunto, corpo)


@shared_task(**HANDLER_OPTIONS)
def handle_convite_ativado(self, event_data: Dict[str, Any]) -> None:
    dados = _dados(event_data)
    logger.info(
        f"[HANDLER] ConviteAtivado: {event_data.get('aggregate_id')} | "
        f"Usuário: {dados.get('usuario_id')}"
    )
    registrar_metrica.delay(metric_name='convites_ativados', value=1)


@shared_task(**HANDLER_OPTIONS)
def handle_convite_cancelado(self, event_data: Dict[str, Any]) -> None:
    dados = _dados(event_data)
    logger.info(
        f"[HANDLER] ConviteCancelado: {event_data.get('aggregate_id')} | "
        f"Email: {dados.get('email')} | Por: {dados.get('cancelado_por_id')}"
    )


@shared_task(**HANDLER_OPTIONS)
def handle_convites_expirados(self, event_data: Dict[str, Any]) -> None:
    convite_ids = _dados(event_data).get('convite_ids') or []
    logger.info(f"[HANDLER] ConvitesExpirados: {len(convite_ids)} convites")
    registrar_metrica.delay(metric_name='convites_expirados', value=len(convite_ids))


@shared_task(**HANDLER_OPTIONS)
def handle_codigo_verificacao_solicitado(self, event_data: Dict[str, Any]) -> None:
    """
    Ações:
    - Enviar o código de verificação por email
    """
    dados = _dados(event_data)
    logger.info(f"[HANDLER] CodigoVerificacaoSolicitado: {dados.get('email')}")

    assunto, corpo = emails.email_codigo_verificacao(dados)
    enviar_email.delay(dados.get('email'), assunto, corpo)


@shared_task(**HANDLER_OPTIONS)
def handle_email_verificado(self, event_data: Dict[str, Any]) -> None:
    logger.info(f"[HANDLER] EmailVerificado: {_dados(event_data).get('email')}")


@shared_task(**HANDLER_OPTIONS)
def handle_usuario_criado(self, event_data: Dict[str, Any]) -> None:
    """
    Ações:
    - Enviar email de boas-vindas
    - Registrar métrica por origem (setup ou convite)
    """
    dados = _dados(event_data)
    logger.info(
        f"[HANDLER] UsuarioCriado: {event_data.get('aggregate_id')} | "
        f"Email: {dados.get('email')} | Origem: {dados.get('origem')}"
    )

    assunto, corpo = emails.email_boas_vindas(dados, settings.ACLP_FRONTEND_URL)
    enviar_email.delay(dados.get('email'), assunto, corpo)

    registrar_metrica.delay(
        metric_name='usuarios_criados',
        value=1,
        tags={'origem': dados.get('origem') or ''},
    )


@shared_task(**HANDLER_OPTIONS)
def handle_usuario_atualizado(self, event_data: Dict[str, Any]) -> None:
    dados = _dados(event_data)
    logger.info(
        f"[HANDLER] UsuarioAtualizado: {event_data.get('aggregate_id')} | "
        f"Campos: {', '.join(dados.get('campos_alterados') or [])}"
    )


@shared_task(**HANDLER_OPTIONS)
def handle_conta_bloqueada(self, event_data: Dict[str, Any]) -> None:
    """
    Ações:
    - Alertar o titular da conta por email
    """
    dados = _dados(event_data)
    logger.warning(
        f"[HANDLER] ContaBloqueada: {dados.get('email')} | "
        f"Tentativas: {dados.get('tentativas')} | IP: {dados.get('ip')}"
    )

    assunto, corpo = emails.email_conta_bloqueada(dados)
    enviar_email.delay(dados.get('email'), assunto, corpo)


@shared_task(**HANDLER_OPTIONS)
def handle_senha_alterada(self, event_data: Dict[str, Any]) -> None:
    dados = _dados(event_data)
    logger.info(f"[HANDLER] SenhaAlterada: {dados.get('email')}")

    assunto, corpo = emails.email_senha_alterada(dados)
    enviar_email.delay(dados.get('email'), assunto, corpo)


@shared_task(**HANDLER_OPTIONS)
def handle_usuario_desativado(self, event_data: Dict[str, Any]) -> None:
    dados = _dados(event_data)
    logger.info(
        f"[HANDLER] UsuarioDesativado: {dados.get('email')} | "
        f"Por: {dados.get('desativado_por_id')}"
    )


# =============================================================================
# Event Dispatcher (Router)
# =============================================================================

EVENT_HANDLERS = {
    'CustodiadoCadastradoEvent': handle_custodiado_cadastrado,
    'CustodiadoAtualizadoEvent': handle_custodiado_atualizado,
    'CustodiadoArquivadoEvent': handle_custodiado_arquivado,
    'CustodiadoReativadoEvent': handle_custodiado_reativado,
    'StatusCustodiadoAlteradoEvent': handle_status_custodiado_alterado,
    'EnderecoAlteradoEvent': handle_endereco_alterado,
    'ComparecimentoRegistradoEvent': handle_comparecimento_registrado,
    'CadastrosIniciaisMigradosEvent': handle_cadastros_iniciais_migrados,
    'ConviteCriadoEvent': handle_convite_criado,
    'ConviteReenviadoEvent': handle_convite_reenviado,
    'ConviteAtivadoEvent': handle_convite_ativado,
    'ConviteCanceladoEvent': handle_convite_cancelado,
    'ConvitesExpiradosEvent': handle_convites_expirados,
    'CodigoVerificacaoSolicitadoEvent': handle_codigo_verificacao_solicitado,
    'EmailVerificadoEvent': handle_email_verificado,
    'UsuarioCriadoEvent': handle_usuario_criado,
    'UsuarioAtualizadoEvent': handle_usuario_atualizado,
    'ContaBloqueadaEvent': handle_conta_bloqueada,
    'SenhaAlteradaEvent': handle_senha_alterada,
    'UsuarioDesativadoEvent': handle_usuario_desativado,
}


@shared_task(bind=True, max_retries=5, default_retry_delay=30)
def dispatch_domain_event(self, event_type: str, event_data: Dict[str, Any]) -> bool:
    """
    Dispatcher central para Domain Events.

    Args:
        event_type: Tipo do evento (ex: 'ComparecimentoRegistradoEvent')
        event_data: Evento serializado

    Returns:
        True se havia handler para o tipo
    """
    handler = EVENT_HANDLERS.get(event_type)

    if handler is None:
        logger.warning(f"[DISPATCHER] Handler não encontrado para {event_type}")
        return False

    logger.info(f"[DISPATCHER] Roteando {event_type} para handler")
    handler.delay(event_data)
    return True


# =============================================================================
# Notification Tasks
# =============================================================================

@shared_task(bind=True, max_retries=3, default_retry_delay=120)
def enviar_email(self, destinatario: str, assunto: str, corpo: str) -> bool:
    """
    Envia email em texto simples.

    Com ``ACLP_EMAIL_ENABLED=False`` apenas loga a mensagem.
    Esgotadas as tentativas, a falha é logada e a tarefa retorna False.

    Returns:
        True se enviado
    """
    if not destinatario:
        logger.warning(f"[EMAIL] Sem destinatário: {assunto}")
        return False

    if not settings.ACLP_EMAIL_ENABLED:
        logger.info(f"[EMAIL] (simulado) Para: {destinatario} | Assunto: {assunto}\n{corpo}")
        return False

    try:
        send_mail(
            subject=assunto,
            message=corpo,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[destinatario],
            fail_silently=False,
        )
    except (SMTPException, OSError) as e:
        logger.warning(f"[EMAIL] Falha ao enviar para {destinatario} (tentativa {self.request.retries + 1}): {e}")
        try:
            raise self.retry(exc=e)
        except MaxRetriesExceededError:
            logger.error(f"[EMAIL] Desistindo de enviar '{assunto}' para {destinatario}: {e}")
            return False

    logger.info(f"[EMAIL] Enviado para {destinatario}: {assunto}")
    return True


# =============================================================================
# Metric Tasks
# =============================================================================

@shared_task(bind=True, ignore_result=True)
def registrar_metrica(
    self,
    metric_name: str,
    value: float,
    tags: Optional[Dict[str, str]] = None
) -> None:
    """Registra métrica no log estruturado."""
    logger.info(f"[METRIC] {metric_name}={value} | tags={tags or {}}")


# =============================================================================
# Scheduled Tasks (Beat)
# =============================================================================

@shared_task(bind=True)
def verificar_status_custodiados(self) -> Dict[str, Any]:
    """
    Reavalia a inadimplência de todos os custodiados ativos.

    Executada às 01:00 e a cada 6 horas.
    """
    logger.info("[SCHEDULED] Verificando status dos custodiados...")

    try:
        from src.config.container import get_container

        resultado = get_container().atualizar_status_custodiados_service().execute()

        registrar_metrica.delay(
            metric_name='custodiados_inadimplentes_novos',
            value=resultado['novos_inadimplentes'],
        )
        return resultado

    except Exception as e:
        logger.error(f"Erro ao verificar status dos custodiados: {e}", exc_info=True)
        raise


@shared_task(bind=True)
def expirar_convites(self) -> int:
    """Marca como expirados os convites pendentes vencidos (diária, 00:00)."""
    logger.info("[SCHEDULED] Expirando convites vencidos...")

    try:
        from src.config.container import get_container

        total = get_container().expirar_convites_service().execute()
        logger.info(f"[SCHEDULED] {total} convites expirados")
        return total

    except Exception as e:
        logger.error(f"Erro ao expirar convites: {e}", exc_info=True)
        raise


@shared_task(bind=True)
def limpar_verificacoes_expiradas(self) -> int:
    """Remove códigos de verificação vencidos (diária, 03:00)."""
    logger.info("[SCHEDULED] Limpando verificações de email expiradas...")

    try:
        from src.config.container import get_container

        return get_container().limpar_verificacoes_service().execute()

    except Exception as e:
        logger.error(f"Erro ao limpar verificações: {e}", exc_info=True)
        raise


@shared_task(bind=True)
def gerar_relatorio_diario(self) -> Dict[str, Any]:
    """
    Gera o resumo de conformidade e envia aos administradores ativos.

    Executada diariamente às 08:00.
    """
    logger.info("[SCHEDULED] Gerando relatório diário...")

    try:
        from src.config.container import get_container
        from src.core.usuarios.entities import TipoUsuario

        container = get_container()
        resumo = container.resumo_status_service().execute()
        relatorio = {'data': resumo['data_consulta'], **resumo}

        destinatarios: List[str] = [
            u.email for u in container.usuario_repository().list_by_tipo(TipoUsuario.ADMIN)
            if u.ativo
        ]
        assunto, corpo = emails.email_relatorio_diario(relatorio)
        for email in destinatarios:
            enviar_email.delay(email, assunto, corpo)

        logger.info(f"[SCHEDULED] Relatório gerado para {len(destinatarios)} administradores: {relatorio}")
        return relatorio

    except Exception as e:
        logger.error(f"Erro ao gerar relatório: {e}", exc_info=True)
        raise


@shared_task(bind=True)
def cleanup_old_events(self, days: int = 90) -> int:
    """
    Remove do Event Store eventos com mais de ``days`` dias (semanal).

    Returns:
        Número de eventos removidos
    """
    logger.info(f"[SCHEDULED] Limpando eventos com mais de {days} dias...")

    try:
        from src.config.container import get_container

        cutoff_date = datetime.now() - timedelta(days=days)
        deleted = get_container().event_store().delete_anteriores(cutoff_date)

        logger.info(f"[SCHEDULED] {deleted} eventos removidos")
        return deleted

    except Exception as e:
        logger.error(f"Erro ao limpar eventos: {e}", exc_info=True)
        raise
