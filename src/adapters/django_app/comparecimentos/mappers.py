"""
Mapper entre HistoricoComparecimento (Core) e HistoricoComparecimentoModel.
"""

from typing import Any, Dict

from src.core.comparecimentos.entities import HistoricoComparecimento, TipoValidacao

from .models import HistoricoComparecimentoModel


class ComparecimentoMapper:
    """
    Mapper para conversão entre HistoricoComparecimento e o Model.

    ``enderecos_alterados`` é gravado como lista JSON.
    """

    @staticmethod
    def to_model_data(entity: HistoricoComparecimento) -> Dict[str, Any]:
        return {
            'custodiado_id': entity.custodiado_id,
            'data_comparecimento': entity.data_comparecimento,
            'hora_comparecimento': entity.hora_comparecimento,
            'tipo_validacao': entity.tipo_validacao.value,
            'validado_por': entity.validado_por,
            'observacoes': entity.observacoes,
            'anexos': entity.anexos,
            'mudanca_endereco': entity.mudanca_endereco,
            'motivo_mudanca_endereco': entity.motivo_mudanca_endereco,
            'enderecos_alterados': list(entity.enderecos_alterados),
            'criado_em': entity.criado_em,
            'atualizado_em': entity.atualizado_em,
        }

    @staticmethod
    def to_entity(model: HistoricoComparecimentoModel) -> HistoricoComparecimento:
        return HistoricoComparecimento(
            id=model.id,
            custodiado_id=model.custodiado_id,
            data_comparecimento=model.data_comparecimento,
            hora_comparecimento=model.hora_comparecimento,
            tipo_validacao=TipoValidacao(model.tipo_validacao),
            validado_por=model.validado_por,
            observacoes=model.observacoes,
            anexos=model.anexos,
            mudanca_endereco=model.mudanca_endereco,
            motivo_mudanca_endereco=model.motivo_mudanca_endereco,
            enderecos_alterados=list(model.enderecos_alterados or []),
            criado_em=model.criado_em,
            atualizado_em=model.atualizado_em,
        )
